from __future__ import annotations

from dataclasses import replace
from datetime import timedelta
from decimal import Decimal
from typing import Optional

import pytest

from src.cardhub.cardhub.companies.model import Company
from src.cardhub.cardhub.core.enums import SubscriptionStatus
from src.cardhub.cardhub.core.exceptions import NotFoundError, ValidationError
from src.cardhub.cardhub.subscriptions.model import Plan, Subscription
from src.cardhub.cardhub.subscriptions.service import SubscriptionService

TRIAL = Plan(plan_id=1, name="Trial", price=Decimal("0"), max_employees=3, duration_in_days=14, is_trial=True)
STARTER = Plan(plan_id=2, name="Starter", price=Decimal("0"), max_employees=5, duration_in_days=0)
BUSINESS = Plan(plan_id=3, name="Business", price=Decimal("199"), max_employees=50, duration_in_days=365)
RETIRED = Plan(plan_id=4, name="Old", price=Decimal("0"), max_employees=1, duration_in_days=30, is_active=False)


class InMemoryPlans:
    def __init__(self, *plans: Plan):
        self._plans = {p.plan_id: p for p in plans}

    def list_active(self):
        return [p for p in self._plans.values() if p.is_active]

    def get_by_id(self, plan_id: int) -> Optional[Plan]:
        return self._plans.get(plan_id)


class InMemorySubscriptions:
    def __init__(self, plans: InMemoryPlans):
        self._plans = plans
        self.rows: list[Subscription] = []

    def get_latest_for_company(self, company_id: int) -> Optional[Subscription]:
        rows = [s for s in self.rows if s.company_id == company_id]
        return rows[-1] if rows else None

    def has_used_trial(self, company_id: int) -> bool:
        return any(s.company_id == company_id and s.plan and s.plan.is_trial for s in self.rows)

    def create(self, *, company_id, plan_id, start_date, end_date, status, price, currency) -> int:
        sub = Subscription(
            subscription_id=len(self.rows) + 1,
            company_id=company_id,
            plan_id=plan_id,
            start_date=start_date,
            end_date=end_date,
            status=status,
            price=price,
            currency=currency,
            plan=self._plans.get_by_id(plan_id),
        )
        self.rows.append(sub)
        return sub.subscription_id

    def replace(self, *, subscription_id, plan_id, start_date, end_date, status, price, currency) -> bool:
        for i, sub in enumerate(self.rows):
            if sub.subscription_id == subscription_id:
                self.rows[i] = replace(
                    sub,
                    plan_id=plan_id,
                    start_date=start_date,
                    end_date=end_date,
                    status=status,
                    price=price,
                    currency=currency,
                    plan=self._plans.get_by_id(plan_id),
                )
                return True
        return False


class InMemoryCompanies:
    def __init__(self, employee_count: int = 0):
        self.employee_count = employee_count

    def get_by_id(self, company_id: int) -> Optional[Company]:
        if company_id != 1:
            return None
        return Company(company_id=1, name="Acme", email="hr@acme.test", password_hash="x")

    def count_employees(self, company_id: int) -> int:
        return self.employee_count


def _service(employee_count: int = 0):
    plans = InMemoryPlans(TRIAL, STARTER, BUSINESS, RETIRED)
    subs = InMemorySubscriptions(plans)
    return SubscriptionService(plans, subs, InMemoryCompanies(employee_count)), subs


def test_list_plans_hides_inactive():
    svc, _ = _service()
    assert [p.plan_id for p in svc.list_plans()] == [1, 2, 3]


def test_trial_subscription_runs_for_plan_duration(fixed_now):
    svc, subs = _service()
    result = svc.subscribe(company_id=1, plan_id=TRIAL.plan_id, now=fixed_now)

    assert result.redirect_to_dashboard is True
    assert result.subscription.end_date == fixed_now + timedelta(days=14)
    assert result.subscription.status == SubscriptionStatus.ACTIVE
    assert len(subs.rows) == 1


def test_trial_only_once(fixed_now):
    svc, _ = _service()
    svc.subscribe(company_id=1, plan_id=TRIAL.plan_id, now=fixed_now)
    with pytest.raises(ValidationError):
        svc.subscribe(company_id=1, plan_id=TRIAL.plan_id, now=fixed_now)


def test_trial_stays_used_after_switching_to_free_plan(fixed_now):
    svc, subs = _service()
    svc.subscribe(company_id=1, plan_id=TRIAL.plan_id, now=fixed_now)
    svc.subscribe(company_id=1, plan_id=STARTER.plan_id, now=fixed_now)

    assert svc.get_current(1).plan_id == STARTER.plan_id
    with pytest.raises(ValidationError):
        svc.subscribe(company_id=1, plan_id=TRIAL.plan_id, now=fixed_now)


def test_free_plan_replaces_current_subscription(fixed_now):
    svc, subs = _service()
    svc.subscribe(company_id=1, plan_id=STARTER.plan_id, now=fixed_now)
    later = fixed_now + timedelta(days=3)
    result = svc.subscribe(company_id=1, plan_id=STARTER.plan_id, now=later)

    assert len(subs.rows) == 1
    assert result.subscription.start_date == later
    # duration 0 means the plan never expires
    assert result.subscription.end_date is None


def test_paid_plan_requires_payment_and_stores_nothing(fixed_now):
    svc, subs = _service()
    result = svc.subscribe(company_id=1, plan_id=BUSINESS.plan_id, now=fixed_now)

    assert result.requires_payment is True
    assert result.redirect_to_dashboard is False
    assert subs.rows == []


def test_subscribe_unknown_company_or_plan():
    svc, _ = _service()
    with pytest.raises(NotFoundError):
        svc.subscribe(company_id=99, plan_id=STARTER.plan_id)
    with pytest.raises(NotFoundError):
        svc.subscribe(company_id=1, plan_id=42)
    with pytest.raises(NotFoundError):
        svc.subscribe(company_id=1, plan_id=RETIRED.plan_id)


def test_usage_counts_remaining_slots(fixed_now):
    svc, _ = _service(employee_count=2)
    svc.subscribe(company_id=1, plan_id=STARTER.plan_id, now=fixed_now)

    usage = svc.get_usage(1, now=fixed_now)
    assert usage.allowed == 5
    assert usage.current == 2
    assert usage.remaining == 3
    assert usage.is_expired is False
    assert svc.allowed_employees(1) == 5


def test_usage_without_subscription():
    svc, _ = _service()
    usage = svc.get_usage(1)
    assert usage.allowed == 0
    assert usage.is_expired is True
    assert usage.to_dict()["currentSubscription"] is None
    assert svc.allowed_employees(1) is None
