from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import quote

import requests

from ..core.constants import XLSX_MIMETYPE
from ..core.exceptions import AuthenticationError, UpstreamUnavailableError
from ..employees.model import Employee
from ..subscriptions.gate import normalize_subscription
from ..subscriptions.model import Subscription
from .context import PortalContext
from .gateway import BackendGateway

logger = logging.getLogger(__name__)


def _unwrap_data(body: Any) -> Any:
    """Backend answers ``{"success", "message", "data"}``; tolerate bare payloads too."""
    if isinstance(body, Mapping) and "data" in body:
        return body["data"]
    return body


def _as_list(value: Any) -> list:
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        for key in ("data", "items", "plans", "employees", "visits"):
            if isinstance(value.get(key), list):
                return value[key]
    return []


@contextmanager
def _payload(what: str):
    """Report a body that does not have the expected shape as an upstream failure."""
    try:
        yield
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamUnavailableError(f"Malformed {what} payload: {e!r}") from e


class HttpBackendClient(BackendGateway):
    """BackendGateway over HTTP using a shared ``requests.Session``."""

    def __init__(self, base_url: str, *, timeout: float = 10.0, session: requests.Session | None = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def _send(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        allow_404: bool = False,
        **kwargs,
    ) -> requests.Response | None:
        headers = dict(kwargs.pop("headers", {}) or {})
        if token:
            headers["Authorization"] = f"Bearer {token}"

        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(method, url, headers=headers, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise UpstreamUnavailableError(f"{method} {path} failed: {e}") from e

        if allow_404 and response.status_code == 404:
            return None
        if response.status_code == 401:
            raise AuthenticationError(self._message(response) or "Unauthorized")
        if response.status_code >= 400:
            raise UpstreamUnavailableError(f"{method} {path} returned {response.status_code}: {self._message(response)}")

        return response

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self._send(method, path, **kwargs)
        if response is None:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(f"{method} {path} returned a non-JSON body") from e

    @staticmethod
    def _message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, Mapping):
            return str(body.get("message") or "")
        return ""

    def login(self, email: str, password: str) -> str:
        body = self._request("POST", "/company/login", json={"email": email, "password": password})
        data = _unwrap_data(body) or {}
        token = data.get("accessToken") if isinstance(data, Mapping) else None
        if not token and isinstance(body, Mapping):
            token = body.get("accessToken")
        if not token:
            raise UpstreamUnavailableError("Login response carried no access token")
        return str(token)

    def get_profile(self, access_token: str) -> dict:
        data = _unwrap_data(self._request("GET", "/company/profile", token=access_token))
        if not isinstance(data, Mapping) or not data.get("id"):
            raise UpstreamUnavailableError("Company profile response carried no id")
        return dict(data)

    def register_company(self, payload: Mapping[str, Any]) -> dict:
        return dict(_unwrap_data(self._request("POST", "/company", json=dict(payload))) or {})

    def get_company(self, ctx: PortalContext) -> dict:
        data = _unwrap_data(self._request("GET", f"/company/{ctx.company_id}", token=ctx.access_token))
        with _payload("company"):
            return dict(data or {})

    def get_subscription(self, ctx: PortalContext) -> Optional[Subscription]:
        body = self._request("GET", f"/company/{ctx.company_id}/subscription", token=ctx.access_token)
        return normalize_subscription(body)

    def list_plans(self) -> Sequence[dict]:
        return _as_list(self._request("GET", "/plans"))

    def subscribe(self, ctx: PortalContext, plan_id: int) -> dict:
        body = self._request("POST", f"/company/{ctx.company_id}/subscribe/{int(plan_id)}", token=ctx.access_token)
        with _payload("subscribe"):
            return dict(_unwrap_data(body) or {})

    def list_employees(self, ctx: PortalContext) -> Sequence[Employee]:
        # limit=0 lifts the backend's default page size.
        body = self._request("GET", "/employee", token=ctx.access_token, params={"limit": 0})
        with _payload("employee list"):
            return [Employee.from_api(item) for item in _as_list(body)]

    def get_visit_count(self, ctx: PortalContext, employee_id: int) -> int:
        data = _unwrap_data(self._request("GET", f"/visits/count/{int(employee_id)}", token=ctx.access_token))
        if not isinstance(data, Mapping):
            return 0
        with _payload("visit count"):
            return int(data.get("visits") or 0)

    def list_visits(self, ctx: PortalContext) -> Sequence[dict]:
        return _as_list(self._request("GET", "/visits", token=ctx.access_token))

    def get_employee_by_url(self, unique_url: str) -> Optional[Employee]:
        body = self._request("GET", f"/employee/by-url/{quote(unique_url, safe='')}", allow_404=True)
        data = _unwrap_data(body)
        if not isinstance(data, Mapping) or not data.get("id"):
            return None
        with _payload("employee"):
            return Employee.from_api(data)

    def log_visit(self, payload: Mapping[str, Any]) -> None:
        self._request("POST", "/visits", json=dict(payload))

    def create_employee(self, ctx: PortalContext, payload: Mapping[str, Any]) -> dict:
        body = self._request("POST", "/employee", token=ctx.access_token, json=dict(payload))
        with _payload("employee"):
            return dict(_unwrap_data(body) or {})

    def update_employee(self, ctx: PortalContext, employee_id: int, payload: Mapping[str, Any]) -> dict:
        body = self._request("PUT", f"/employee/{int(employee_id)}", token=ctx.access_token, json=dict(payload))
        with _payload("employee"):
            return dict(_unwrap_data(body) or {})

    def delete_employee(self, ctx: PortalContext, employee_id: int) -> None:
        self._request("DELETE", f"/employee/{int(employee_id)}", token=ctx.access_token)

    def export_employees(self, ctx: PortalContext) -> bytes:
        return self._send("GET", "/employee/export/excel", token=ctx.access_token).content

    def import_employees(self, ctx: PortalContext, filename: str, content: bytes) -> dict:
        files = {"file": (filename, content, XLSX_MIMETYPE)}
        body = self._request("POST", "/employee/import/excel", token=ctx.access_token, files=files)
        with _payload("employee import"):
            return dict(_unwrap_data(body) or {})

    def logout(self, ctx: PortalContext) -> None:
        self._request("POST", "/company/logout", token=ctx.access_token)
