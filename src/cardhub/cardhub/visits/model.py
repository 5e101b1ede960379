from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.constants import DEFAULT_DEVICE_TYPE, UNKNOWN
from ..core.enums import VisitSource


@dataclass(frozen=True)
class ClientInfo:
    """What we could tell about the visitor's client from its user-agent."""

    os: str = UNKNOWN
    browser: str = UNKNOWN
    device_type: str = DEFAULT_DEVICE_TYPE


@dataclass(frozen=True)
class Visit:
    """Immutable record of one card view."""

    visit_id: int
    employee_id: int
    source: VisitSource
    os: str
    browser: str
    device_type: str
    ip_address: str
    visited_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.visit_id,
            "employeeId": self.employee_id,
            "source": self.source.value,
            "os": self.os,
            "browser": self.browser,
            "deviceType": self.device_type,
            "ipAddress": self.ip_address,
            "visitedAt": to_iso(self.visited_at),
        }


@dataclass(frozen=True)
class NewVisit:
    """Write model: the fields a caller supplies when logging a visit."""

    employee_id: int
    source: VisitSource = VisitSource.LINK
    os: str = UNKNOWN
    browser: str = UNKNOWN
    device_type: str = DEFAULT_DEVICE_TYPE
    ip_address: str = ""

    def to_payload(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "source": self.source.value,
            "os": self.os,
            "browser": self.browser,
            "deviceType": self.device_type,
            "ipAddress": self.ip_address,
        }


@dataclass(frozen=True)
class CountRow:
    """One bucket of a grouped visit statistic."""

    key: str
    count: int

    def to_dict(self, key_name: str) -> dict:
        return {key_name: self.key, "count": self.count}
