from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..companies.repository import CompanyRepository
from ..core.enums import SubscriptionStatus
from ..core.exceptions import NotFoundError, ValidationError
from .gate import compute_access_state
from .model import Plan, Subscription
from .repository import PlanRepository, SubscriptionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscribeResult:
    message: str
    redirect_to_dashboard: bool = False
    requires_payment: bool = False
    subscription: Optional[Subscription] = None

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "redirectToDashboard": self.redirect_to_dashboard,
            "requiresPayment": self.requires_payment,
            "subscription": self.subscription.to_dict() if self.subscription else None,
        }


@dataclass(frozen=True)
class CompanyUsage:
    allowed: int
    current: int
    is_expired: bool
    subscription: Optional[Subscription]

    @property
    def remaining(self) -> int:
        return self.allowed - self.current

    def to_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "current": self.current,
            "remaining": self.remaining,
            "isExpired": self.is_expired,
            "currentSubscription": self.subscription.to_dict() if self.subscription else None,
        }


class SubscriptionService:
    """Use cases: list plans, subscribe a company, read its current plan."""

    def __init__(self, plans: PlanRepository, subscriptions: SubscriptionRepository, companies: CompanyRepository):
        self._plans = plans
        self._subscriptions = subscriptions
        self._companies = companies

    def list_plans(self) -> Sequence[Plan]:
        return self._plans.list_active()

    def get_current(self, company_id: int) -> Optional[Subscription]:
        return self._subscriptions.get_latest_for_company(company_id)

    def subscribe(self, *, company_id: int, plan_id: int, now: datetime | None = None) -> SubscribeResult:
        if not self._companies.get_by_id(company_id):
            raise NotFoundError("Company not found")

        plan = self._plans.get_by_id(plan_id)
        if not plan or not plan.is_active:
            raise NotFoundError("Plan not found")

        if plan.is_trial and self._subscriptions.has_used_trial(company_id):
            raise ValidationError("The trial plan can only be used once")

        if not plan.is_free:
            # Checkout happens with the payment provider; nothing is stored until it confirms.
            logger.info("Company %s picked paid plan %s, payment required", company_id, plan_id)
            return SubscribeResult(message="Payment required", requires_payment=True)

        now = now or now_utc()
        end_date = now + timedelta(days=plan.duration_in_days) if plan.duration_in_days > 0 else None
        existing = self._subscriptions.get_latest_for_company(company_id)

        # A trial row is kept as history so has_used_trial stays true after switching plans.
        keep_history = existing is not None and existing.plan is not None and existing.plan.is_trial
        if existing and existing.subscription_id is not None and not keep_history:
            self._subscriptions.replace(
                subscription_id=existing.subscription_id,
                plan_id=plan.plan_id,
                start_date=now,
                end_date=end_date,
                status=SubscriptionStatus.ACTIVE,
                price=plan.price,
                currency=plan.currency,
            )
        else:
            self._subscriptions.create(
                company_id=company_id,
                plan_id=plan.plan_id,
                start_date=now,
                end_date=end_date,
                status=SubscriptionStatus.ACTIVE,
                price=plan.price,
                currency=plan.currency,
            )

        logger.info("Company %s subscribed to free plan %s", company_id, plan_id)
        return SubscribeResult(
            message="Subscribed to the free plan",
            redirect_to_dashboard=True,
            subscription=self._subscriptions.get_latest_for_company(company_id),
        )

    def allowed_employees(self, company_id: int) -> Optional[int]:
        """Employee cap of the current plan, or None when the company has no subscription."""
        subscription = self.get_current(company_id)
        return subscription.max_employees if subscription else None

    def get_usage(self, company_id: int, *, now: datetime | None = None) -> CompanyUsage:
        subscription = self.get_current(company_id)
        state = compute_access_state(subscription, now=now)
        return CompanyUsage(
            allowed=subscription.max_employees if subscription else 0,
            current=self._companies.count_employees(company_id),
            is_expired=state.is_expired if subscription else True,
            subscription=subscription,
        )
