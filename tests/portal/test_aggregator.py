import pytest

from src.cardhub.cardhub.core.exceptions import UpstreamUnavailableError
from src.cardhub.cardhub.portal.aggregator import EmployeeAggregator
from src.cardhub.cardhub.portal.context import PortalContext
from src.cardhub.cardhub.portal.usage import UsageService
from tests.portal.fakes import OMAR, SARA, FakeBackend

CTX = PortalContext(company_id=1, access_token="token-1")


def test_failed_count_degrades_to_zero_and_total_comes_from_visit_list():
    backend = FakeBackend(
        employees=[SARA, OMAR],
        visit_counts={1: 5},
        failing_counts={2},
        company_visits=[{"id": i} for i in range(7)],
    )

    result = EmployeeAggregator(backend, max_workers=4).aggregate(CTX)

    assert [(e.employee_id, e.visits) for e in result.employees] == [(1, 5), (2, 0)]
    assert result.total_visits_count == 7
    assert len(result.visits) == 7


def test_visit_list_failure_gives_empty_list():
    backend = FakeBackend(employees=[SARA], visit_counts={1: 3}, failing={"list_visits"})

    result = EmployeeAggregator(backend).aggregate(CTX)

    assert result.employees[0].visits == 3
    assert result.visits == []
    assert result.total_visits_count == 0


def test_employee_list_failure_propagates():
    backend = FakeBackend(failing={"list_employees"})
    with pytest.raises(UpstreamUnavailableError):
        EmployeeAggregator(backend).aggregate(CTX)


def test_no_employees():
    result = EmployeeAggregator(FakeBackend()).aggregate(CTX)
    assert result.employees == []
    assert result.total_visits_count == 0


def test_usage_view_without_subscription(fixed_now):
    backend = FakeBackend(employees=[SARA], visit_counts={1: 2})
    view = UsageService(backend, EmployeeAggregator(backend)).build(CTX, now=fixed_now)

    assert view.has_subscription is False
    assert view.is_expired is False
    assert view.company["name"] == "Acme"
    assert view.employees[0].visits == 2


def test_usage_view_with_expired_subscription(fixed_now):
    backend = FakeBackend(subscription={"data": {"id": 1, "planId": 2, "endDate": "2026-01-01T00:00:00Z"}})
    view = UsageService(backend, EmployeeAggregator(backend)).build(CTX, now=fixed_now)

    assert view.has_subscription is True
    assert view.is_expired is True


def test_usage_subscription_failure_propagates():
    backend = FakeBackend(failing={"get_subscription"})
    with pytest.raises(UpstreamUnavailableError):
        UsageService(backend, EmployeeAggregator(backend)).build(CTX)
