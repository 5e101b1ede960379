from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EDITABLE_FIELDS, Employee, employee_columns
from .repository import EmployeeRepository

_COLUMNS = ", ".join(employee_columns())
_WRITABLE = set(EDITABLE_FIELDS.values())


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (employee_id,))
            row = fetchone(cur)
            return Employee.from_row(row) if row else None

    def get_by_unique_url(self, unique_url: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE unique_url=%s", (unique_url,))
            row = fetchone(cur)
            return Employee.from_row(row) if row else None

    def list_for_company(self, company_id: int, *, limit: Optional[int] = None) -> Sequence[Employee]:
        sql = f"SELECT {_COLUMNS} FROM employees WHERE company_id=%s ORDER BY id DESC"
        params: tuple = (company_id,)
        if limit is not None:
            sql += " LIMIT %s"
            params = (company_id, int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [Employee.from_row(r) for r in fetchall(cur)]

    def create(self, *, company_id: int, unique_url: str, values: Mapping[str, Any]) -> int:
        data = {k: v for k, v in values.items() if k in _WRITABLE}
        data["company_id"] = company_id
        data["unique_url"] = unique_url
        columns = ", ".join(data)
        placeholders = ",".join(["%s"] * len(data))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO employees({columns}) VALUES({placeholders})", tuple(data.values()))
            return int(cur.lastrowid)

    def update(self, employee_id: int, values: Mapping[str, Any]) -> bool:
        data = {k: v for k, v in values.items() if k in _WRITABLE}
        if not data:
            return False
        assignments = ", ".join(f"{col}=%s" for col in data)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {assignments} WHERE id=%s", (*data.values(), employee_id))
            return cur.rowcount > 0

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (employee_id,))
            return cur.rowcount > 0
