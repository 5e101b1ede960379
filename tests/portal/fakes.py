from __future__ import annotations

from typing import Any, Mapping, Optional

from src.cardhub.cardhub.core.exceptions import UpstreamUnavailableError
from src.cardhub.cardhub.employees.model import Employee
from src.cardhub.cardhub.portal.context import PortalContext
from src.cardhub.cardhub.subscriptions.gate import normalize_subscription
from src.cardhub.cardhub.subscriptions.model import Subscription


class InlineDispatcher:
    """Runs dispatched work immediately so tests can assert on it."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs) -> None:
        self.submitted += 1
        fn(*args, **kwargs)


class FakeBackend:
    """In-memory BackendGateway. Names in ``failing`` raise UpstreamUnavailableError."""

    def __init__(
        self,
        *,
        employees: list[Employee] | None = None,
        visit_counts: dict[int, int] | None = None,
        company_visits: list[dict] | None = None,
        subscription: Optional[Mapping[str, Any]] = None,
        failing: set[str] | None = None,
        failing_counts: set[int] | None = None,
    ):
        self.employees = list(employees or [])
        self.visit_counts = dict(visit_counts or {})
        self.company_visits = list(company_visits or [])
        self.subscription = subscription
        self.failing = set(failing or ())
        self.failing_counts = set(failing_counts or ())
        self.logged_visits: list[dict] = []
        self.created: list[dict] = []
        self.uploads: list[tuple[str, bytes]] = []

    def _maybe_fail(self, name: str) -> None:
        if name in self.failing:
            raise UpstreamUnavailableError(f"{name} is down")

    def login(self, email: str, password: str) -> str:
        self._maybe_fail("login")
        return "token-1"

    def get_profile(self, access_token: str) -> dict:
        return {"id": 1, "name": "Acme", "email": "hr@acme.test"}

    def register_company(self, payload):
        self._maybe_fail("register_company")
        return {"id": 2}

    def get_company(self, ctx: PortalContext) -> dict:
        self._maybe_fail("get_company")
        return {"id": ctx.company_id, "name": "Acme"}

    def get_subscription(self, ctx: PortalContext) -> Optional[Subscription]:
        self._maybe_fail("get_subscription")
        return normalize_subscription(self.subscription)

    def list_plans(self):
        return [{"id": 2, "name": "Starter", "price": "0.00", "currency": "SAR", "features": []}]

    def subscribe(self, ctx: PortalContext, plan_id: int) -> dict:
        return {"message": "ok", "redirectToDashboard": True}

    def list_employees(self, ctx: PortalContext):
        self._maybe_fail("list_employees")
        return list(self.employees)

    def get_visit_count(self, ctx: PortalContext, employee_id: int) -> int:
        if employee_id in self.failing_counts:
            raise UpstreamUnavailableError(f"count for {employee_id} is down")
        return self.visit_counts.get(employee_id, 0)

    def list_visits(self, ctx: PortalContext):
        self._maybe_fail("list_visits")
        return list(self.company_visits)

    def get_employee_by_url(self, unique_url: str) -> Optional[Employee]:
        self._maybe_fail("get_employee_by_url")
        return next((e for e in self.employees if e.unique_url == unique_url), None)

    def log_visit(self, payload) -> None:
        self._maybe_fail("log_visit")
        self.logged_visits.append(dict(payload))

    def create_employee(self, ctx, payload):
        self.created.append(dict(payload))
        return {"id": len(self.created)}

    def update_employee(self, ctx, employee_id, payload):
        return {"id": employee_id}

    def delete_employee(self, ctx, employee_id) -> None:
        return None

    def export_employees(self, ctx) -> bytes:
        self._maybe_fail("export_employees")
        return b"PK-fake-workbook"

    def import_employees(self, ctx, filename: str, content: bytes) -> dict:
        self._maybe_fail("import_employees")
        self.uploads.append((filename, content))
        return {"imported": [1, 2], "skipped": [], "summary": {"totalImported": 2, "totalSkipped": 0, "limitReached": False}}

    def logout(self, ctx) -> None:
        return None


SARA = Employee(employee_id=1, company_id=1, name="Sara", unique_url="sara", design_id="modern", job_title="Sales")
OMAR = Employee(employee_id=2, company_id=1, name="Omar", unique_url="omar")


class StubResponse:
    def __init__(self, status_code: int, body=None, text: str = "", content: bytes = b""):
        self.status_code = status_code
        self._body = body
        self.text = text
        self.content = content

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class RoutedSession:
    """Stands in for ``requests.Session``: answers by the URL's path suffix."""

    def __init__(self, routes: dict[str, StubResponse]):
        self._routes = routes
        self.calls: list[str] = []

    def request(self, method, url, **kwargs):
        self.calls.append(url)
        for suffix, response in self._routes.items():
            if url.split("?")[0].endswith(suffix):
                return response
        return StubResponse(404, {"success": False, "message": "Not found"})
