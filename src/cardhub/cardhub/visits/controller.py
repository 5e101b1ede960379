from __future__ import annotations

import logging

from flask import Flask, g, request

from ..common.http import fail, make_bearer_required, ok
from ..core.exceptions import AuthorizationError, NotFoundError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    bearer_required = make_bearer_required(container.company_service.resolve_token)
    visits = container.visit_service

    @app.route("/visits", methods=["POST"], endpoint="api_log_visit")
    def log_visit():
        """Public: the portal posts one visit per card view.

        Failures are logged and answered with 200 so the card page never sees them.
        """
        try:
            visit_id = visits.log_visit(request.get_json(silent=True) or {})
            return ok({"id": visit_id}, "Visit logged", 201)
        except Exception as e:
            logger.warning("Visit was not logged: %s", e)
            return ok(None, "Request processed", 200)

    @app.route("/visits", methods=["GET"], endpoint="api_list_visits")
    @bearer_required
    def list_visits():
        try:
            return ok([v.to_dict() for v in visits.list_for_company(g.company_id)])
        except Exception:
            logger.exception("Failed to list visits for company %s", g.company_id)
            return fail("Failed to list visits", 500)

    @app.route("/visits/count/<int:employee_id>", methods=["GET"], endpoint="api_visit_count")
    @bearer_required
    def visit_count(employee_id: int):
        try:
            count = visits.count_for_employee(company_id=g.company_id, employee_id=employee_id)
            return ok({"employeeId": employee_id, "visits": count})
        except NotFoundError as e:
            return fail(str(e), 404)
        except AuthorizationError as e:
            return fail(str(e), 403)
        except Exception:
            logger.exception("Failed to count visits for employee %s", employee_id)
            return fail("Failed to count visits", 500)

    stats = {
        "daily": visits.daily,
        "devices": visits.device_stats,
        "browsers": visits.browser_stats,
        "os": visits.os_stats,
        "sources": visits.source_stats,
        "qr-vs-link": lambda **ids: visits.qr_vs_link(**ids).to_dict(),
        "overview": visits.overview,
    }

    @app.route("/visits/<kind>/<int:employee_id>", methods=["GET"], endpoint="api_visit_stats")
    @bearer_required
    def visit_stats(kind: str, employee_id: int):
        handler = stats.get(kind)
        if handler is None:
            return fail("Unknown statistic", 404)
        try:
            return ok(handler(company_id=g.company_id, employee_id=employee_id))
        except NotFoundError as e:
            return fail(str(e), 404)
        except AuthorizationError as e:
            return fail(str(e), 403)
        except Exception:
            logger.exception("Failed to compute %s stats for employee %s", kind, employee_id)
            return fail("Failed to compute visit statistics", 500)
