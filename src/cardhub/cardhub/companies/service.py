from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import as_aware, now_utc
from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.constants import DEFAULT_TOKEN_TTL_HOURS
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import Company
from .repository import CompanyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedToken:
    """What the login endpoint hands back to the portal."""

    access_token: str
    company_id: int
    expires_at: datetime


class CompanyService:
    """Use cases: register a company, log it in, resolve bearer tokens."""

    def __init__(self, companies: CompanyRepository, *, token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS):
        self._companies = companies
        self._token_ttl = timedelta(hours=int(token_ttl_hours))

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        logo_url: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        name = require_non_empty(name, "Company name")
        email = require_email(email)
        require_min_length(password, "Password", 6)

        if self._companies.get_by_email(email):
            raise ValidationError("Email is already registered")

        company_id = self._companies.create_company(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            phone=optional_text(phone),
            logo_url=optional_text(logo_url),
            description=optional_text(description),
        )
        logger.info("Registered company %s (%s)", company_id, email)
        return company_id

    def authenticate(self, email: str, password: str, *, now: datetime | None = None) -> IssuedToken:
        company = self._companies.get_by_email((email or "").strip().lower())
        if not company or not company.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(company.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME'
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        now = now or now_utc()
        token = secrets.token_urlsafe(32)
        expires_at = now + self._token_ttl
        self._companies.save_token(token=token, company_id=company.company_id, expires_at=expires_at)
        return IssuedToken(access_token=token, company_id=company.company_id, expires_at=expires_at)

    def resolve_token(self, token: str, *, now: datetime | None = None) -> int:
        """Return the company id behind a bearer token."""
        if not token:
            raise AuthenticationError("Missing bearer token")

        stored = self._companies.get_token(token)
        if not stored:
            raise AuthenticationError("Invalid token")
        if as_aware(stored.expires_at) <= (now or now_utc()):
            self._companies.delete_token(token)
            raise AuthenticationError("Token expired")
        return stored.company_id

    def logout(self, token: str) -> None:
        self._companies.delete_token(token)

    def get_profile(self, company_id: int) -> Company:
        company = self._companies.get_by_id(company_id)
        if not company:
            raise NotFoundError("Company not found")
        return company

    def count_employees(self, company_id: int) -> int:
        return self._companies.count_employees(company_id)
