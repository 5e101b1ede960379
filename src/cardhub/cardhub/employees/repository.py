from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_unique_url(self, unique_url: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_for_company(self, company_id: int, *, limit: Optional[int] = None) -> Sequence[Employee]:
        """``limit=None`` returns every employee of the company."""
        raise NotImplementedError

    def create(self, *, company_id: int, unique_url: str, values: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, values: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError
