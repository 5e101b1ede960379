from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.constants import DEFAULT_CURRENCY
from ..core.enums import SubscriptionStatus


@dataclass(frozen=True)
class Plan:
    plan_id: int
    name: str
    price: Decimal
    max_employees: int
    duration_in_days: int
    description: Optional[str] = None
    is_trial: bool = False
    is_active: bool = True
    currency: str = DEFAULT_CURRENCY

    @property
    def is_free(self) -> bool:
        return self.price == 0

    def features(self) -> list[str]:
        if not self.description:
            return []
        return [line.strip() for line in self.description.splitlines() if line.strip()]

    def to_dict(self) -> dict:
        return {
            "id": self.plan_id,
            "name": self.name,
            "description": self.description,
            "features": self.features(),
            "price": str(self.price),
            "maxEmployees": self.max_employees,
            "durationInDays": self.duration_in_days,
            "isTrial": self.is_trial,
            "isActive": self.is_active,
            "currency": self.currency,
        }


@dataclass(frozen=True)
class Subscription:
    """A company's plan purchase.

    ``end_date`` of None means the subscription never expires.
    """

    subscription_id: Optional[int]
    company_id: Optional[int]
    plan_id: Optional[int]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    price: Decimal = Decimal("0")
    currency: str = DEFAULT_CURRENCY
    custom_max_employees: Optional[int] = None
    plan: Optional[Plan] = None

    @property
    def max_employees(self) -> int:
        if self.custom_max_employees is not None:
            return self.custom_max_employees
        return self.plan.max_employees if self.plan else 0

    def to_dict(self) -> dict:
        return {
            "id": self.subscription_id,
            "companyId": self.company_id,
            "planId": self.plan_id,
            "plan": self.plan.to_dict() if self.plan else None,
            "startDate": to_iso(self.start_date),
            "endDate": to_iso(self.end_date),
            "status": self.status.value,
            "price": str(self.price),
            "currency": self.currency,
            "customMaxEmployees": self.custom_max_employees,
        }
