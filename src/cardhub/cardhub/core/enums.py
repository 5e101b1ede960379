from __future__ import annotations

from enum import Enum


class VisitSource(str, Enum):
    """How a visitor reached a card."""

    QR = "qr"
    LINK = "link"

    @classmethod
    def from_hint(cls, hint: str | None) -> "VisitSource":
        return cls.QR if hint == cls.QR.value else cls.LINK


class DeviceType(str, Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class SubscriptionStatus(str, Enum):
    """Lifecycle of a company subscription."""

    ACTIVE = "active"
    PENDING = "pending"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
