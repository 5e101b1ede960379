from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_EMPLOYEE_PAGE_SIZE
from ..core.exceptions import AuthorizationError, EmployeeLimitError, NotFoundError, ValidationError
from .model import EDITABLE_FIELDS, Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _slugify(text: str) -> str:
    return _SLUG_RE.sub("-", text.lower()).strip("-")[:40]


@dataclass(frozen=True)
class ImportResult:
    imported: list[int] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    limit_reached: bool = False

    def to_dict(self) -> dict:
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "summary": {
                "totalImported": len(self.imported),
                "totalSkipped": len(self.skipped),
                "limitReached": self.limit_reached,
            },
        }


class EmployeeService:
    """Use cases: manage a company's employees and look up public cards.

    ``allowed_employees`` returns the company's employee cap, or None when it
    has no subscription yet (no cap is enforced then).
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        *,
        allowed_employees: Callable[[int], Optional[int]] | None = None,
        count_employees: Callable[[int], int] | None = None,
    ):
        self._employees = employees
        self._allowed_employees = allowed_employees
        self._count_employees = count_employees

    def _to_values(self, payload: Mapping[str, Any]) -> dict:
        values = {}
        for api_name, attr in EDITABLE_FIELDS.items():
            if api_name in payload:
                values[attr] = optional_text(payload[api_name])
            elif attr in payload:
                values[attr] = optional_text(payload[attr])
        return values

    def _new_unique_url(self, name: str, requested: Optional[str]) -> str:
        if requested:
            slug = _slugify(requested)
            if not slug:
                raise ValidationError("Unique URL is not valid")
            if self._employees.get_by_unique_url(slug):
                raise ValidationError("Unique URL is already taken")
            return slug

        base = _slugify(name) or "card"
        while True:
            candidate = f"{base}-{secrets.token_hex(3)}"
            if not self._employees.get_by_unique_url(candidate):
                return candidate

    def _check_limit(self, company_id: int) -> None:
        if not self._allowed_employees or not self._count_employees:
            return
        allowed = self._allowed_employees(company_id)
        if allowed is None:
            return
        if self._count_employees(company_id) >= allowed:
            raise EmployeeLimitError(f"Your plan allows {allowed} employees")

    def create(self, *, company_id: int, payload: Mapping[str, Any]) -> int:
        values = self._to_values(payload)
        values["name"] = require_non_empty(values.get("name") or "", "Name")
        self._check_limit(company_id)

        unique_url = self._new_unique_url(values["name"], optional_text(payload.get("uniqueUrl")))
        employee_id = self._employees.create(company_id=company_id, unique_url=unique_url, values=values)
        logger.info("Created employee %s for company %s (%s)", employee_id, company_id, unique_url)
        return employee_id

    def _owned(self, *, company_id: int, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if employee.company_id != company_id:
            raise AuthorizationError("Employee belongs to another company")
        return employee

    def get(self, *, company_id: int, employee_id: int) -> Employee:
        return self._owned(company_id=company_id, employee_id=employee_id)

    def update(self, *, company_id: int, employee_id: int, payload: Mapping[str, Any]) -> Employee:
        self._owned(company_id=company_id, employee_id=employee_id)
        values = self._to_values(payload)
        if "name" in values:
            values["name"] = require_non_empty(values["name"] or "", "Name")
        if values:
            self._employees.update(employee_id, values)
        return self._owned(company_id=company_id, employee_id=employee_id)

    def delete(self, *, company_id: int, employee_id: int) -> None:
        self._owned(company_id=company_id, employee_id=employee_id)
        if not self._employees.delete_by_id(employee_id):
            raise NotFoundError("Employee not found")
        logger.info("Deleted employee %s of company %s", employee_id, company_id)

    def list_for_company(self, company_id: int, *, limit: int = DEFAULT_EMPLOYEE_PAGE_SIZE) -> Sequence[Employee]:
        """``limit=0`` lifts the page size and returns every employee."""
        if limit < 0:
            raise ValidationError("limit must be zero or positive")
        return self._employees.list_for_company(company_id, limit=limit or None)

    def get_by_unique_url(self, unique_url: str) -> Employee:
        employee = self._employees.get_by_unique_url((unique_url or "").strip())
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def export_rows(self, company_id: int) -> list[dict]:
        """Every employee of the company as API-shaped rows for the workbook."""
        return [e.to_dict() for e in self._employees.list_for_company(company_id, limit=None)]

    def import_rows(self, company_id: int, rows: Iterable[Mapping[str, Any]]) -> ImportResult:
        """Create one employee per row; bad rows are skipped, not fatal.

        Once the plan limit is hit the remaining rows are skipped as well.
        """
        imported: list[int] = []
        skipped: list[str] = []
        limit_reached = False

        # Row 1 of the sheet is the header.
        for row_number, row in enumerate(rows, start=2):
            if limit_reached:
                skipped.append(f"Row {row_number}: plan limit reached")
                continue
            try:
                imported.append(self.create(company_id=company_id, payload=row))
            except EmployeeLimitError as e:
                limit_reached = True
                skipped.append(f"Row {row_number}: {e}")
            except ValidationError as e:
                skipped.append(f"Row {row_number}: {e}")

        logger.info(
            "Imported %d employees for company %s (%d skipped, limit reached=%s)",
            len(imported),
            company_id,
            len(skipped),
            limit_reached,
        )
        return ImportResult(imported=imported, skipped=skipped, limit_reached=limit_reached)
