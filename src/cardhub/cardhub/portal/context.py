from __future__ import annotations

from dataclasses import dataclass
from typing import Any, MutableMapping, Optional


@dataclass(frozen=True)
class PortalContext:
    """Who the portal is acting for: passed explicitly into every service call."""

    company_id: int
    access_token: str

    @classmethod
    def from_session(cls, session: MutableMapping[str, Any]) -> Optional["PortalContext"]:
        token = session.get("access_token")
        company_id = session.get("company_id")
        if not token or company_id is None:
            return None
        return cls(company_id=int(company_id), access_token=str(token))

    def save(self, session: MutableMapping[str, Any]) -> None:
        session["access_token"] = self.access_token
        session["company_id"] = self.company_id


@dataclass(frozen=True)
class RequestMeta:
    """The bits of an incoming card request the visit recorder needs."""

    user_agent: str = ""
    source_hint: Optional[str] = None
    forwarded_for: str = ""
    remote_addr: str = ""

    @property
    def ip_address(self) -> str:
        # X-Forwarded-For is "client, proxy1, proxy2"; the client comes first.
        forwarded = (self.forwarded_for or "").split(",")[0].strip()
        return forwarded or (self.remote_addr or "").strip()

    @classmethod
    def from_request(cls, request) -> "RequestMeta":
        return cls(
            user_agent=request.headers.get("User-Agent", ""),
            source_hint=request.args.get("source"),
            forwarded_for=request.headers.get("X-Forwarded-For", ""),
            remote_addr=request.remote_addr or "",
        )
