from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Company, CompanyToken
from .repository import CompanyRepository

_COMPANY_COLUMNS = "id, name, email, password_hash, phone, logo_url, description, is_active, created_at"


def _row_to_company(row: dict) -> Company:
    return Company(
        company_id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        phone=row.get("phone"),
        logo_url=row.get("logo_url"),
        description=row.get("description"),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: int) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COMPANY_COLUMNS} FROM companies WHERE id=%s", (company_id,))
            row = fetchone(cur)
            return _row_to_company(row) if row else None

    def get_by_email(self, email: str) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COMPANY_COLUMNS} FROM companies WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_company(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO companies(name, email, password_hash, phone, logo_url, description, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (name, email, password_hash, phone, logo_url, description),
            )
            return int(cur.lastrowid)

    def count_employees(self, company_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees WHERE company_id=%s", (company_id,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def save_token(self, *, token: str, company_id: int, expires_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO company_tokens(token, company_id, expires_at) VALUES(%s,%s,%s)",
                (token, company_id, expires_at.replace(tzinfo=None)),
            )

    def get_token(self, token: str) -> Optional[CompanyToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT token, company_id, expires_at FROM company_tokens WHERE token=%s", (token,))
            row = fetchone(cur)
            if not row:
                return None
            return CompanyToken(token=row["token"], company_id=int(row["company_id"]), expires_at=row["expires_at"])

    def delete_token(self, token: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM company_tokens WHERE token=%s", (token,))
            return cur.rowcount > 0
