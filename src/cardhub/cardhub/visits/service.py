from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..core.constants import DEFAULT_DEVICE_TYPE, UNKNOWN
from ..core.enums import VisitSource
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import NewVisit, Visit
from .repository import VisitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QrVsLink:
    qr: int
    link: int

    @property
    def total(self) -> int:
        return self.qr + self.link

    def to_dict(self) -> dict:
        total = self.total
        return {
            "qr": self.qr,
            "link": self.link,
            "total": total,
            "qrPercentage": round(self.qr * 100 / total, 1) if total else 0.0,
            "linkPercentage": round(self.link * 100 / total, 1) if total else 0.0,
        }


def _text(value: Any, default: str) -> str:
    text = str(value).strip() if value is not None else ""
    return text[:255] or default


class VisitService:
    """Use cases: log card views and report on them."""

    def __init__(self, visits: VisitRepository, employees: EmployeeRepository):
        self._visits = visits
        self._employees = employees

    def log_visit(self, payload: Mapping[str, Any]) -> int:
        """Store one visit. Missing client fields fall back to defaults instead of failing."""
        try:
            employee_id = int(payload.get("employeeId") or payload.get("employee_id"))
        except (TypeError, ValueError):
            raise ValidationError("employeeId is required")

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        visit = NewVisit(
            employee_id=employee_id,
            source=VisitSource.from_hint(payload.get("source")),
            os=_text(payload.get("os"), UNKNOWN),
            browser=_text(payload.get("browser"), UNKNOWN),
            device_type=_text(payload.get("deviceType"), DEFAULT_DEVICE_TYPE),
            ip_address=_text(payload.get("ipAddress"), ""),
        )
        return self._visits.create(visit)

    def _check_owner(self, *, company_id: int, employee_id: int) -> None:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if employee.company_id != company_id:
            raise AuthorizationError("Employee belongs to another company")

    def count_for_employee(self, *, company_id: int, employee_id: int) -> int:
        self._check_owner(company_id=company_id, employee_id=employee_id)
        return self._visits.count_for_employee(employee_id)

    def list_for_company(self, company_id: int) -> Sequence[Visit]:
        return self._visits.list_for_company(company_id)

    def daily(self, *, company_id: int, employee_id: int) -> list[dict]:
        self._check_owner(company_id=company_id, employee_id=employee_id)
        return [r.to_dict("day") for r in self._visits.daily_counts(employee_id)]

    def _grouped(self, *, company_id: int, employee_id: int, column: str, key_name: str) -> list[dict]:
        self._check_owner(company_id=company_id, employee_id=employee_id)
        return [r.to_dict(key_name) for r in self._visits.grouped_counts(employee_id, column)]

    def device_stats(self, *, company_id: int, employee_id: int) -> list[dict]:
        return self._grouped(company_id=company_id, employee_id=employee_id, column="device_type", key_name="deviceType")

    def browser_stats(self, *, company_id: int, employee_id: int) -> list[dict]:
        return self._grouped(company_id=company_id, employee_id=employee_id, column="browser", key_name="browser")

    def os_stats(self, *, company_id: int, employee_id: int) -> list[dict]:
        return self._grouped(company_id=company_id, employee_id=employee_id, column="os", key_name="os")

    def source_stats(self, *, company_id: int, employee_id: int) -> list[dict]:
        return self._grouped(company_id=company_id, employee_id=employee_id, column="source", key_name="source")

    def qr_vs_link(self, *, company_id: int, employee_id: int) -> QrVsLink:
        self._check_owner(company_id=company_id, employee_id=employee_id)
        counts = {r.key: r.count for r in self._visits.grouped_counts(employee_id, "source")}
        return QrVsLink(qr=counts.get(VisitSource.QR.value, 0), link=counts.get(VisitSource.LINK.value, 0))

    def overview(self, *, company_id: int, employee_id: int) -> dict:
        ids = {"company_id": company_id, "employee_id": employee_id}
        return {
            "totalVisits": self.count_for_employee(**ids),
            "dailyVisits": self.daily(**ids),
            "deviceStats": self.device_stats(**ids),
            "browserStats": self.browser_stats(**ids),
            "osStats": self.os_stats(**ids),
            "sourceStats": self.source_stats(**ids),
            "qrVsLinkStats": self.qr_vs_link(**ids).to_dict(),
        }
