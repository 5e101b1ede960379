from __future__ import annotations

from typing import Protocol, Sequence

from .model import CountRow, NewVisit, Visit

GROUPABLE_COLUMNS = ("device_type", "browser", "os", "source")


class VisitRepository(Protocol):
    """Append-only store of card views."""

    def create(self, visit: NewVisit) -> int:
        raise NotImplementedError

    def count_for_employee(self, employee_id: int) -> int:
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[Visit]:
        """Newest first."""
        raise NotImplementedError

    def daily_counts(self, employee_id: int) -> Sequence[CountRow]:
        """Visits per calendar day (``YYYY-MM-DD``), newest day first."""
        raise NotImplementedError

    def grouped_counts(self, employee_id: int, column: str) -> Sequence[CountRow]:
        """Visits grouped by one of ``GROUPABLE_COLUMNS``, largest bucket first."""
        raise NotImplementedError
