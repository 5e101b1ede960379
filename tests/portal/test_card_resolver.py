import pytest

from src.cardhub.cardhub.core.exceptions import NotFoundError
from src.cardhub.cardhub.employees.model import Employee
from src.cardhub.cardhub.portal.card_resolver import CardResolver, CardService, select_template
from src.cardhub.cardhub.portal.context import RequestMeta
from src.cardhub.cardhub.portal.visit_recorder import VisitRecorder
from tests.portal.fakes import OMAR, SARA, FakeBackend, InlineDispatcher


def _card_service(backend):
    dispatcher = InlineDispatcher()
    return CardService(CardResolver(backend), VisitRecorder(backend, dispatcher)), dispatcher


def test_template_selection_order():
    plain = Employee(employee_id=3, company_id=1, name="X", unique_url="x")
    assert select_template("gold", SARA) == "gold"
    assert select_template(None, SARA) == "modern"
    assert select_template("  ", SARA) == "modern"
    assert select_template(None, plain) == "classic"
    assert select_template("", plain) == "classic"


def test_unknown_card_records_no_visit():
    backend = FakeBackend(employees=[SARA])
    svc, dispatcher = _card_service(backend)

    with pytest.raises(NotFoundError):
        svc.open_card("classic", "nobody", RequestMeta())

    assert dispatcher.submitted == 0
    assert backend.logged_visits == []


def test_open_card_records_exactly_one_visit():
    backend = FakeBackend(employees=[SARA, OMAR])
    svc, dispatcher = _card_service(backend)
    meta = RequestMeta(
        user_agent="Mozilla/5.0 (iPhone; CPU iPhone OS 17_2 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.2 Mobile/15E148 Safari/604.1",
        source_hint="qr",
        forwarded_for="203.0.113.9, 10.0.0.1",
        remote_addr="10.0.0.1",
    )

    card = svc.open_card(None, "omar", meta)

    assert card.employee.employee_id == 2
    assert card.template_id == "classic"
    assert dispatcher.submitted == 1
    (visit,) = backend.logged_visits
    assert visit["employeeId"] == 2
    assert visit["source"] == "qr"
    assert visit["deviceType"] == "mobile"
    assert visit["ipAddress"] == "203.0.113.9"


def test_ip_falls_back_to_remote_addr():
    assert RequestMeta(remote_addr="198.51.100.4").ip_address == "198.51.100.4"
    assert RequestMeta().ip_address == ""
