from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import SubscriptionStatus
from .model import Plan, Subscription


class PlanRepository(Protocol):
    def list_active(self) -> Sequence[Plan]:
        raise NotImplementedError

    def get_by_id(self, plan_id: int) -> Optional[Plan]:
        raise NotImplementedError


class SubscriptionRepository(Protocol):
    def get_latest_for_company(self, company_id: int) -> Optional[Subscription]:
        """Most recent subscription by start date, with its plan embedded."""
        raise NotImplementedError

    def has_used_trial(self, company_id: int) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        company_id: int,
        plan_id: int,
        start_date: datetime,
        end_date: Optional[datetime],
        status: SubscriptionStatus,
        price: Decimal,
        currency: str,
    ) -> int:
        raise NotImplementedError

    def replace(
        self,
        *,
        subscription_id: int,
        plan_id: int,
        start_date: datetime,
        end_date: Optional[datetime],
        status: SubscriptionStatus,
        price: Decimal,
        currency: str,
    ) -> bool:
        raise NotImplementedError
