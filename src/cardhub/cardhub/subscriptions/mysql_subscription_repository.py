from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import as_aware
from ..core.enums import SubscriptionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Plan, Subscription
from .repository import PlanRepository, SubscriptionRepository

_PLAN_COLUMNS = "id, name, description, price, max_employees, duration_in_days, is_trial, is_active, currency"


def _row_to_plan(row: dict, prefix: str = "") -> Plan:
    return Plan(
        plan_id=int(row[f"{prefix}id"]),
        name=row[f"{prefix}name"],
        description=row.get(f"{prefix}description"),
        price=to_decimal(row.get(f"{prefix}price")),
        max_employees=int(row.get(f"{prefix}max_employees") or 0),
        duration_in_days=int(row.get(f"{prefix}duration_in_days") or 0),
        is_trial=bool(row.get(f"{prefix}is_trial", False)),
        is_active=bool(row.get(f"{prefix}is_active", True)),
        currency=row.get(f"{prefix}currency") or "SAR",
    )


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    # DATETIME columns hold UTC without tzinfo.
    return value.replace(tzinfo=None) if value else None


class MySQLPlanRepository(PlanRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[Plan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PLAN_COLUMNS} FROM plans WHERE is_active=1 ORDER BY price, id")
            return [_row_to_plan(r) for r in fetchall(cur)]

    def get_by_id(self, plan_id: int) -> Optional[Plan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PLAN_COLUMNS} FROM plans WHERE id=%s", (plan_id,))
            row = fetchone(cur)
            return _row_to_plan(row) if row else None


class MySQLSubscriptionRepository(SubscriptionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest_for_company(self, company_id: int) -> Optional[Subscription]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.company_id, s.plan_id, s.start_date, s.end_date, s.status,
                       s.price, s.currency, s.custom_max_employees,
                       p.id AS p_id, p.name AS p_name, p.description AS p_description,
                       p.price AS p_price, p.max_employees AS p_max_employees,
                       p.duration_in_days AS p_duration_in_days, p.is_trial AS p_is_trial,
                       p.is_active AS p_is_active, p.currency AS p_currency
                FROM company_subscriptions s
                LEFT JOIN plans p ON p.id = s.plan_id
                WHERE s.company_id=%s
                ORDER BY s.start_date DESC, s.id DESC
                LIMIT 1
                """,
                (company_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Subscription(
                subscription_id=int(row["id"]),
                company_id=int(row["company_id"]),
                plan_id=int(row["plan_id"]),
                start_date=as_aware(row["start_date"]) if row.get("start_date") else None,
                end_date=as_aware(row["end_date"]) if row.get("end_date") else None,
                status=SubscriptionStatus(row.get("status") or SubscriptionStatus.PENDING.value),
                price=to_decimal(row.get("price")),
                currency=row.get("currency") or "SAR",
                custom_max_employees=row.get("custom_max_employees"),
                plan=_row_to_plan(row, prefix="p_") if row.get("p_id") else None,
            )

    def has_used_trial(self, company_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS used
                FROM company_subscriptions s
                JOIN plans p ON p.id = s.plan_id
                WHERE s.company_id=%s AND p.is_trial=1
                LIMIT 1
                """,
                (company_id,),
            )
            return fetchone(cur) is not None

    def create(
        self,
        *,
        company_id: int,
        plan_id: int,
        start_date: datetime,
        end_date: Optional[datetime],
        status: SubscriptionStatus,
        price: Decimal,
        currency: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO company_subscriptions(company_id, plan_id, start_date, end_date, status, price, currency)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (company_id, plan_id, _naive(start_date), _naive(end_date), status.value, price, currency),
            )
            return int(cur.lastrowid)

    def replace(
        self,
        *,
        subscription_id: int,
        plan_id: int,
        start_date: datetime,
        end_date: Optional[datetime],
        status: SubscriptionStatus,
        price: Decimal,
        currency: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE company_subscriptions
                SET plan_id=%s, start_date=%s, end_date=%s, status=%s, price=%s, currency=%s
                WHERE id=%s
                """,
                (plan_id, _naive(start_date), _naive(end_date), status.value, price, currency, subscription_id),
            )
            return cur.rowcount > 0
