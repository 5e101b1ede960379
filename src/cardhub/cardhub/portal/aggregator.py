from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Sequence

from ..employees.model import Employee
from .context import PortalContext
from .gateway import BackendGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageAggregate:
    """Denormalized per-company view for the usage dashboard.

    ``total_visits_count`` comes from the company visit list and is not
    reconciled with the sum of per-employee counts.
    """

    employees: list[Employee] = field(default_factory=list)
    visits: list[dict] = field(default_factory=list)
    total_visits_count: int = 0


class EmployeeAggregator:
    def __init__(self, backend: BackendGateway, *, max_workers: int = 8):
        self._backend = backend
        self._max_workers = max(1, int(max_workers))

    def aggregate(self, ctx: PortalContext) -> UsageAggregate:
        # Primary data: a failure here propagates to the caller.
        employees = list(self._backend.list_employees(ctx))
        logger.info("Company %s: loaded %d employees", ctx.company_id, len(employees))

        counted = self._count_visits(ctx, employees)
        visits = self._company_visits(ctx)
        return UsageAggregate(employees=counted, visits=visits, total_visits_count=len(visits))

    def _count_visits(self, ctx: PortalContext, employees: Sequence[Employee]) -> list[Employee]:
        if not employees:
            return []
        workers = min(self._max_workers, len(employees))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cardhub-visits") as pool:
            futures = [pool.submit(self._count_one, ctx, employee) for employee in employees]
            return [future.result() for future in futures]

    def _count_one(self, ctx: PortalContext, employee: Employee) -> Employee:
        try:
            return employee.with_visits(self._backend.get_visit_count(ctx, employee.employee_id))
        except Exception as e:
            logger.warning("Visit count failed for employee %s: %s", employee.employee_id, e)
            return employee.with_visits(0)

    def _company_visits(self, ctx: PortalContext) -> list[dict]:
        try:
            return list(self._backend.list_visits(ctx))
        except Exception as e:
            logger.warning("Visit list failed for company %s: %s", ctx.company_id, e)
            return []
