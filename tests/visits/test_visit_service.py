from __future__ import annotations

from typing import Optional

import pytest

from src.cardhub.cardhub.core.enums import VisitSource
from src.cardhub.cardhub.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.cardhub.cardhub.employees.model import Employee
from src.cardhub.cardhub.visits.model import CountRow, NewVisit
from src.cardhub.cardhub.visits.service import VisitService


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(employee_id)


class InMemoryVisits:
    def __init__(self):
        self.created: list[NewVisit] = []

    def create(self, visit: NewVisit) -> int:
        self.created.append(visit)
        return len(self.created)

    def count_for_employee(self, employee_id: int) -> int:
        return sum(1 for v in self.created if v.employee_id == employee_id)

    def daily_counts(self, employee_id: int):
        return [CountRow("2026-03-01", self.count_for_employee(employee_id))]

    def grouped_counts(self, employee_id: int, column: str):
        counts: dict[str, int] = {}
        for v in self.created:
            if v.employee_id != employee_id:
                continue
            value = getattr(v, column)
            key = value.value if isinstance(value, VisitSource) else value
            counts[key] = counts.get(key, 0) + 1
        return [CountRow(k, c) for k, c in sorted(counts.items(), key=lambda kv: -kv[1])]


def _service():
    visits = InMemoryVisits()
    employees = InMemoryEmployees(
        Employee(employee_id=1, company_id=10, name="Sara", unique_url="sara"),
        Employee(employee_id=2, company_id=20, name="Omar", unique_url="omar"),
    )
    return VisitService(visits, employees), visits


def test_log_visit_applies_defaults():
    svc, visits = _service()
    svc.log_visit({"employeeId": 1})

    (visit,) = visits.created
    assert visit.source == VisitSource.LINK
    assert visit.os == "unknown"
    assert visit.browser == "unknown"
    assert visit.device_type == "desktop"
    assert visit.ip_address == ""


def test_log_visit_keeps_client_fields():
    svc, visits = _service()
    svc.log_visit(
        {"employeeId": "1", "source": "qr", "os": "iOS", "browser": "Mobile Safari", "deviceType": "mobile", "ipAddress": "1.2.3.4"}
    )
    visit = visits.created[0]
    assert visit.source == VisitSource.QR
    assert (visit.os, visit.browser, visit.device_type, visit.ip_address) == ("iOS", "Mobile Safari", "mobile", "1.2.3.4")


def test_unknown_source_hint_counts_as_link():
    svc, visits = _service()
    svc.log_visit({"employeeId": 1, "source": "QR-code"})
    assert visits.created[0].source == VisitSource.LINK


def test_log_visit_requires_known_employee():
    svc, visits = _service()
    with pytest.raises(ValidationError):
        svc.log_visit({})
    with pytest.raises(NotFoundError):
        svc.log_visit({"employeeId": 99})
    assert visits.created == []


def test_stats_are_company_scoped():
    svc, _ = _service()
    svc.log_visit({"employeeId": 2})
    with pytest.raises(AuthorizationError):
        svc.count_for_employee(company_id=10, employee_id=2)
    assert svc.count_for_employee(company_id=20, employee_id=2) == 1


def test_qr_vs_link_percentages():
    svc, _ = _service()
    for source in ("qr", "link", "link", "link"):
        svc.log_visit({"employeeId": 1, "source": source})

    stats = svc.qr_vs_link(company_id=10, employee_id=1).to_dict()
    assert stats == {"qr": 1, "link": 3, "total": 4, "qrPercentage": 25.0, "linkPercentage": 75.0}


def test_overview_bundles_every_statistic():
    svc, _ = _service()
    svc.log_visit({"employeeId": 1, "deviceType": "mobile", "browser": "Chrome", "os": "Android"})

    overview = svc.overview(company_id=10, employee_id=1)
    assert overview["totalVisits"] == 1
    assert overview["deviceStats"] == [{"deviceType": "mobile", "count": 1}]
    assert overview["browserStats"] == [{"browser": "Chrome", "count": 1}]
    assert overview["osStats"] == [{"os": "Android", "count": 1}]
    assert overview["sourceStats"] == [{"source": "link", "count": 1}]
    assert overview["dailyVisits"] == [{"day": "2026-03-01", "count": 1}]
