from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import as_aware
from ..core.enums import VisitSource
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CountRow, NewVisit, Visit
from .repository import GROUPABLE_COLUMNS, VisitRepository


class MySQLVisitRepository(VisitRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, visit: NewVisit) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO visits(employee_id, source, os, browser, device_type, ip_address)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    visit.employee_id,
                    visit.source.value,
                    visit.os,
                    visit.browser,
                    visit.device_type,
                    visit.ip_address,
                ),
            )
            return int(cur.lastrowid)

    def count_for_employee(self, employee_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM visits WHERE employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def list_for_company(self, company_id: int) -> Sequence[Visit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT v.id, v.employee_id, v.source, v.os, v.browser, v.device_type, v.ip_address, v.visited_at
                FROM visits v
                JOIN employees e ON e.id = v.employee_id
                WHERE e.company_id=%s
                ORDER BY v.visited_at DESC, v.id DESC
                """,
                (company_id,),
            )
            return [
                Visit(
                    visit_id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    source=VisitSource.from_hint(r.get("source")),
                    os=r.get("os") or "unknown",
                    browser=r.get("browser") or "unknown",
                    device_type=r.get("device_type") or "desktop",
                    ip_address=r.get("ip_address") or "",
                    visited_at=as_aware(r["visited_at"]) if r.get("visited_at") else None,
                )
                for r in fetchall(cur)
            ]

    def daily_counts(self, employee_id: int) -> Sequence[CountRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DATE(visited_at) AS bucket, COUNT(*) AS n
                FROM visits
                WHERE employee_id=%s
                GROUP BY DATE(visited_at)
                ORDER BY bucket DESC
                """,
                (employee_id,),
            )
            return [CountRow(key=str(r["bucket"]), count=int(r["n"])) for r in fetchall(cur)]

    def grouped_counts(self, employee_id: int, column: str) -> Sequence[CountRow]:
        if column not in GROUPABLE_COLUMNS:
            raise ValueError(f"Cannot group visits by {column!r}")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {column} AS bucket, COUNT(*) AS n
                FROM visits
                WHERE employee_id=%s
                GROUP BY {column}
                ORDER BY n DESC
                """,
                (employee_id,),
            )
            return [CountRow(key=str(r["bucket"] or "unknown"), count=int(r["n"])) for r in fetchall(cur)]
