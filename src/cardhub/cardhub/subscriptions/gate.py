"""Subscription gate: map a subscription record to access flags.

Upstream payloads are not consistently shaped (the record may sit under
``data`` or ``subscription``, and the plan marker may be ``plan``,
``planId`` or only ``id``). ``normalize_subscription`` is the one place that
inspects those shapes; everything after it works on ``Subscription``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from ..common.datetime_utils import as_aware, now_utc, parse_datetime
from ..core.enums import SubscriptionStatus
from .model import Plan, Subscription

_ENVELOPE_KEYS = ("data", "subscription")
_PRESENCE_KEYS = ("plan", "planId", "plan_id", "id")

SubscriptionLike = Union[Subscription, Mapping[str, Any], None]


@dataclass(frozen=True)
class AccessState:
    has_subscription: bool
    is_expired: bool

    def to_dict(self) -> dict:
        return {"hasSubscription": self.has_subscription, "isExpired": self.is_expired}


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) not in (None, ""):
            return payload[key]
    return None


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def _as_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value)) if value not in (None, "") else Decimal("0")
    except InvalidOperation:
        return Decimal("0")


def _unwrap(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    current = payload
    while True:
        inner = next((current[k] for k in _ENVELOPE_KEYS if isinstance(current.get(k), Mapping)), None)
        if inner is None:
            return current
        current = inner


def _normalize_plan(value: Any) -> Optional[Plan]:
    if not isinstance(value, Mapping) or _as_int(value.get("id")) is None:
        return None
    is_active = _pick(value, "isActive", "is_active")
    return Plan(
        plan_id=int(value["id"]),
        name=str(value.get("name") or ""),
        description=value.get("description"),
        price=_as_decimal(value.get("price")),
        max_employees=_as_int(_pick(value, "maxEmployees", "max_employees")) or 0,
        duration_in_days=_as_int(_pick(value, "durationInDays", "duration_in_days")) or 0,
        is_trial=bool(_pick(value, "isTrial", "is_trial")),
        is_active=True if is_active is None else bool(is_active),
        currency=str(value.get("currency") or "SAR"),
    )


def _normalize_status(value: Any) -> SubscriptionStatus:
    try:
        return SubscriptionStatus(str(value).lower())
    except ValueError:
        return SubscriptionStatus.ACTIVE


def normalize_subscription(payload: Any) -> Optional[Subscription]:
    """Turn an upstream subscription payload into a ``Subscription`` or None.

    A record counts as present when any of ``plan``, ``planId`` or ``id`` is
    truthy after unwrapping response envelopes.
    """
    if payload is None or isinstance(payload, Subscription):
        return payload
    if not isinstance(payload, Mapping):
        return None

    record = _unwrap(payload)
    if not any(record.get(key) for key in _PRESENCE_KEYS):
        return None

    plan = _normalize_plan(record.get("plan"))
    plan_id = _as_int(_pick(record, "planId", "plan_id"))
    if plan_id is None and plan is not None:
        plan_id = plan.plan_id

    return Subscription(
        subscription_id=_as_int(record.get("id")),
        company_id=_as_int(_pick(record, "companyId", "company_id")),
        plan_id=plan_id,
        start_date=parse_datetime(_pick(record, "startDate", "start_date")),
        end_date=parse_datetime(_pick(record, "endDate", "end_date")),
        status=_normalize_status(record.get("status") or SubscriptionStatus.ACTIVE.value),
        price=_as_decimal(record.get("price")),
        currency=str(record.get("currency") or "SAR"),
        custom_max_employees=_as_int(_pick(record, "customMaxEmployees", "custom_max_employees")),
        plan=plan,
    )


def compute_access_state(subscription: SubscriptionLike, *, now: datetime | None = None) -> AccessState:
    """Pure: no I/O. A null ``end_date`` never expires."""
    normalized = normalize_subscription(subscription)
    if normalized is None:
        return AccessState(has_subscription=False, is_expired=False)

    now = as_aware(now) if now else now_utc()
    end_date = as_aware(normalized.end_date) if normalized.end_date else None
    return AccessState(has_subscription=True, is_expired=end_date is not None and end_date < now)


def route_after_login(state: AccessState) -> str:
    """Endpoint name the portal redirects to once logged in."""
    return "usage" if state.has_subscription else "plans"
