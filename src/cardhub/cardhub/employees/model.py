from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_datetime, to_iso

# API (camelCase) name -> entity attribute for the fields a company may edit.
EDITABLE_FIELDS: dict[str, str] = {
    "name": "name",
    "email": "email",
    "jobTitle": "job_title",
    "phone": "phone",
    "whatsapp": "whatsapp",
    "location": "location",
    "about": "about",
    "facebook": "facebook",
    "instagram": "instagram",
    "tiktok": "tiktok",
    "snapchat": "snapchat",
    "profileImageUrl": "profile_image_url",
    "designId": "design_id",
    "cardUrl": "card_url",
    "qrCode": "qr_code",
}


@dataclass(frozen=True)
class Employee:
    """Domain entity: the person behind a public card.

    ``visits`` is filled in at read time by the usage dashboard; it is never stored.
    """

    employee_id: int
    company_id: Optional[int]
    name: str
    unique_url: str
    design_id: Optional[str] = None
    email: Optional[str] = None
    job_title: Optional[str] = None
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
    snapchat: Optional[str] = None
    profile_image_url: Optional[str] = None
    card_url: Optional[str] = None
    qr_code: Optional[str] = None
    created_at: Optional[datetime] = None
    visits: int = 0

    def with_visits(self, visits: int) -> "Employee":
        return replace(self, visits=int(visits))

    def to_dict(self) -> dict:
        out = {api: getattr(self, attr) for api, attr in EDITABLE_FIELDS.items()}
        out.update(
            {
                "id": self.employee_id,
                "companyId": self.company_id,
                "uniqueUrl": self.unique_url,
                "createdAt": to_iso(self.created_at),
                "visits": self.visits,
            }
        )
        return out

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Employee":
        """Build from the backend's JSON shape (camelCase keys)."""
        values = {attr: payload.get(api) for api, attr in EDITABLE_FIELDS.items()}
        values["name"] = payload.get("name") or ""
        return cls(
            employee_id=int(payload["id"]),
            company_id=int(payload["companyId"]) if payload.get("companyId") is not None else None,
            unique_url=str(payload.get("uniqueUrl") or ""),
            created_at=parse_datetime(payload.get("createdAt")),
            visits=int(payload.get("visits") or 0),
            **values,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Employee":
        known = {f.name for f in fields(cls)} - {"employee_id", "visits"}
        values = {k: v for k, v in row.items() if k in known}
        return cls(employee_id=int(row["id"]), **values)


def employee_columns() -> list[str]:
    """Column list for SELECTs; mirrors the dataclass minus computed fields."""
    return ["id"] + [f.name for f in fields(Employee) if f.name not in ("employee_id", "visits")]
