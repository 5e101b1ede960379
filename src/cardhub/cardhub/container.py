from __future__ import annotations

from dataclasses import dataclass

from .companies.mysql_company_repository import MySQLCompanyRepository
from .companies.service import CompanyService
from .core.constants import DEFAULT_TOKEN_TTL_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .subscriptions.mysql_subscription_repository import MySQLPlanRepository, MySQLSubscriptionRepository
from .subscriptions.service import SubscriptionService
from .visits.mysql_visit_repository import MySQLVisitRepository
from .visits.service import VisitService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    companies_repo: MySQLCompanyRepository
    plans_repo: MySQLPlanRepository
    subscriptions_repo: MySQLSubscriptionRepository
    employees_repo: MySQLEmployeeRepository
    visits_repo: MySQLVisitRepository

    company_service: CompanyService
    subscription_service: SubscriptionService
    employee_service: EmployeeService
    visit_service: VisitService


def build_container(*, db_config: dict, token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    companies_repo = MySQLCompanyRepository(conn)
    plans_repo = MySQLPlanRepository(conn)
    subscriptions_repo = MySQLSubscriptionRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    visits_repo = MySQLVisitRepository(conn)

    company_service = CompanyService(companies_repo, token_ttl_hours=token_ttl_hours)
    subscription_service = SubscriptionService(plans_repo, subscriptions_repo, companies_repo)
    employee_service = EmployeeService(
        employees_repo,
        allowed_employees=subscription_service.allowed_employees,
        count_employees=companies_repo.count_employees,
    )
    visit_service = VisitService(visits_repo, employees_repo)

    return Container(
        conn=conn,
        companies_repo=companies_repo,
        plans_repo=plans_repo,
        subscriptions_repo=subscriptions_repo,
        employees_repo=employees_repo,
        visits_repo=visits_repo,
        company_service=company_service,
        subscription_service=subscription_service,
        employee_service=employee_service,
        visit_service=visit_service,
    )
