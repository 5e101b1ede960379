from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Company:
    """Domain entity: a tenant that owns employees and subscriptions."""

    company_id: int
    name: str
    email: str
    password_hash: str
    phone: Optional[str] = None
    logo_url: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.company_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "logoUrl": self.logo_url,
            "description": self.description,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class CompanyToken:
    token: str
    company_id: int
    expires_at: datetime
