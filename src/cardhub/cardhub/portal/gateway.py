from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..employees.model import Employee
from ..subscriptions.model import Subscription
from .context import PortalContext


class BackendGateway(Protocol):
    """What the portal needs from the API backend.

    Implementations raise ``UpstreamUnavailableError`` when a call fails and
    ``AuthenticationError`` when the backend rejects credentials.
    """

    def login(self, email: str, password: str) -> str:
        """Return a bearer token."""
        raise NotImplementedError

    def get_profile(self, access_token: str) -> dict:
        raise NotImplementedError

    def register_company(self, payload: Mapping[str, Any]) -> dict:
        raise NotImplementedError

    def get_company(self, ctx: PortalContext) -> dict:
        raise NotImplementedError

    def get_subscription(self, ctx: PortalContext) -> Optional[Subscription]:
        raise NotImplementedError

    def list_plans(self) -> Sequence[dict]:
        raise NotImplementedError

    def subscribe(self, ctx: PortalContext, plan_id: int) -> dict:
        raise NotImplementedError

    def list_employees(self, ctx: PortalContext) -> Sequence[Employee]:
        """All employees of the company, without a page limit."""
        raise NotImplementedError

    def get_visit_count(self, ctx: PortalContext, employee_id: int) -> int:
        raise NotImplementedError

    def list_visits(self, ctx: PortalContext) -> Sequence[dict]:
        raise NotImplementedError

    def get_employee_by_url(self, unique_url: str) -> Optional[Employee]:
        """None when no employee has that URL."""
        raise NotImplementedError

    def log_visit(self, payload: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def create_employee(self, ctx: PortalContext, payload: Mapping[str, Any]) -> dict:
        raise NotImplementedError

    def update_employee(self, ctx: PortalContext, employee_id: int, payload: Mapping[str, Any]) -> dict:
        raise NotImplementedError

    def delete_employee(self, ctx: PortalContext, employee_id: int) -> None:
        raise NotImplementedError

    def export_employees(self, ctx: PortalContext) -> bytes:
        """Return the company's employees as an .xlsx workbook."""
        raise NotImplementedError

    def import_employees(self, ctx: PortalContext, filename: str, content: bytes) -> dict:
        """Upload an .xlsx workbook; returns the import summary."""
        raise NotImplementedError

    def logout(self, ctx: PortalContext) -> None:
        raise NotImplementedError
