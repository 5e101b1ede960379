from datetime import datetime, timedelta

from src.cardhub.cardhub.subscriptions.gate import (
    AccessState,
    compute_access_state,
    normalize_subscription,
    route_after_login,
)
from src.cardhub.cardhub.subscriptions.model import Subscription


def test_no_subscription_is_never_expired(fixed_now):
    for payload in (None, {}, {"data": None}, {"plan": None, "planId": None, "id": 0}):
        assert compute_access_state(payload, now=fixed_now) == AccessState(False, False)


def test_future_end_date_is_active(fixed_now):
    payload = {"id": 3, "planId": 1, "endDate": (fixed_now + timedelta(days=1)).isoformat()}
    assert compute_access_state(payload, now=fixed_now) == AccessState(True, False)


def test_past_end_date_is_expired(fixed_now):
    payload = {"data": {"plan": {"id": 1, "name": "Trial"}, "endDate": "2026-02-01T00:00:00Z"}}
    state = compute_access_state(payload, now=fixed_now)
    assert state.has_subscription is True
    assert state.is_expired is True


def test_end_date_equal_to_now_is_not_expired(fixed_now):
    payload = {"planId": 2, "endDate": fixed_now.isoformat()}
    assert compute_access_state(payload, now=fixed_now).is_expired is False


def test_null_end_date_never_expires(fixed_now):
    payload = {"subscription": {"id": 9, "endDate": None}}
    assert compute_access_state(payload, now=fixed_now) == AccessState(True, False)


def test_naive_end_date_is_read_as_utc(fixed_now):
    sub = Subscription(
        subscription_id=1,
        company_id=1,
        plan_id=1,
        start_date=None,
        end_date=datetime(2026, 3, 1, 8, 59, 59),
    )
    assert compute_access_state(sub, now=fixed_now).is_expired is True


def test_normalize_reads_nested_plan():
    sub = normalize_subscription(
        {
            "data": {
                "id": 4,
                "companyId": 7,
                "plan": {"id": 2, "name": "Starter", "maxEmployees": 5, "price": "0.00"},
                "customMaxEmployees": None,
            }
        }
    )
    assert sub is not None
    assert sub.plan_id == 2
    assert sub.company_id == 7
    assert sub.max_employees == 5
    assert sub.plan.is_free


def test_route_after_login():
    assert route_after_login(AccessState(False, False)) == "plans"
    assert route_after_login(AccessState(True, False)) == "usage"
    # Expired companies still land on the dashboard, which shows the renewal banner.
    assert route_after_login(AccessState(True, True)) == "usage"


def test_access_state_to_dict():
    assert AccessState(True, False).to_dict() == {"hasSubscription": True, "isExpired": False}


def test_plan_id_alone_marks_presence():
    sub = normalize_subscription({"data": {"planId": "p"}})
    assert sub is not None
    assert sub.plan_id is None
    assert compute_access_state({"data": {"planId": "p"}}).has_subscription is True
