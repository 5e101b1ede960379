from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Company, CompanyToken


class CompanyRepository(Protocol):
    """Repository interface for companies and their login tokens.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, company_id: int) -> Optional[Company]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Company]:
        raise NotImplementedError

    def create_company(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        phone: Optional[str],
        logo_url: Optional[str],
        description: Optional[str],
    ) -> int:
        raise NotImplementedError

    def count_employees(self, company_id: int) -> int:
        raise NotImplementedError

    def save_token(self, *, token: str, company_id: int, expires_at: datetime) -> None:
        raise NotImplementedError

    def get_token(self, token: str) -> Optional[CompanyToken]:
        raise NotImplementedError

    def delete_token(self, token: str) -> bool:
        raise NotImplementedError
