from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..employees.model import Employee
from ..subscriptions.gate import AccessState, compute_access_state
from ..subscriptions.model import Subscription
from .aggregator import EmployeeAggregator
from .context import PortalContext
from .gateway import BackendGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageView:
    company: dict
    subscription: Optional[Subscription]
    access: AccessState
    employees: list[Employee]
    visits: list[dict]
    total_visits_count: int

    @property
    def has_subscription(self) -> bool:
        return self.access.has_subscription

    @property
    def is_expired(self) -> bool:
        return self.access.is_expired


class UsageService:
    """Build the usage dashboard: subscription flags, company and employee visits.

    Subscription, company and employee fetches are primary data and their
    failures propagate; visit counts degrade to zero inside the aggregator.
    """

    def __init__(self, backend: BackendGateway, aggregator: EmployeeAggregator):
        self._backend = backend
        self._aggregator = aggregator

    def build(self, ctx: PortalContext, *, now: datetime | None = None) -> UsageView:
        subscription = self._backend.get_subscription(ctx)
        access = compute_access_state(subscription, now=now)
        company = self._backend.get_company(ctx)
        aggregate = self._aggregator.aggregate(ctx)

        for employee in aggregate.employees:
            logger.debug("%s (%s) -> %s visits", employee.name, employee.employee_id, employee.visits)

        return UsageView(
            company=company,
            subscription=subscription,
            access=access,
            employees=aggregate.employees,
            visits=aggregate.visits,
            total_visits_count=aggregate.total_visits_count,
        )
