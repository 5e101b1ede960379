from __future__ import annotations

import io
import logging

from flask import Flask, g, request, send_file

from ..common.http import fail, make_bearer_required, ok
from ..core.constants import DEFAULT_EMPLOYEE_PAGE_SIZE, EMPLOYEE_EXPORT_FILENAME, XLSX_MIMETYPE
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container
from .excel import rows_to_workbook, workbook_to_rows

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    bearer_required = make_bearer_required(container.company_service.resolve_token)

    def _payload() -> dict:
        # The portal proxies HTML forms; accept JSON and form bodies alike.
        if request.is_json:
            return request.get_json(silent=True) or {}
        return request.form.to_dict()

    @app.route("/employee", methods=["GET"], endpoint="api_list_employees")
    @bearer_required
    def list_employees():
        limit_s = request.args.get("limit", str(DEFAULT_EMPLOYEE_PAGE_SIZE))
        try:
            limit = int(limit_s)
            employees = container.employee_service.list_for_company(g.company_id, limit=limit)
            return ok([e.to_dict() for e in employees])
        except ValueError:
            return fail("limit must be an integer", 400)
        except ValidationError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Failed to list employees for company %s", g.company_id)
            return fail("Failed to list employees", 500)

    @app.route("/employee", methods=["POST"], endpoint="api_create_employee")
    @bearer_required
    def create_employee():
        try:
            employee_id = container.employee_service.create(company_id=g.company_id, payload=_payload())
            return ok({"id": employee_id}, "Employee created", 201)
        except ValidationError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Failed to create employee for company %s", g.company_id)
            return fail("Failed to create employee", 500)

    @app.route("/employee/<int:employee_id>", methods=["GET"], endpoint="api_get_employee")
    @bearer_required
    def get_employee(employee_id: int):
        try:
            employee = container.employee_service.get(company_id=g.company_id, employee_id=employee_id)
            return ok(employee.to_dict())
        except NotFoundError as e:
            return fail(str(e), 404)
        except AuthorizationError as e:
            return fail(str(e), 403)

    @app.route("/employee/<int:employee_id>", methods=["PUT"], endpoint="api_update_employee")
    @bearer_required
    def update_employee(employee_id: int):
        try:
            employee = container.employee_service.update(
                company_id=g.company_id, employee_id=employee_id, payload=_payload()
            )
            return ok(employee.to_dict(), "Employee updated")
        except NotFoundError as e:
            return fail(str(e), 404)
        except AuthorizationError as e:
            return fail(str(e), 403)
        except ValidationError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Failed to update employee %s", employee_id)
            return fail("Failed to update employee", 500)

    @app.route("/employee/<int:employee_id>", methods=["DELETE"], endpoint="api_delete_employee")
    @bearer_required
    def delete_employee(employee_id: int):
        try:
            container.employee_service.delete(company_id=g.company_id, employee_id=employee_id)
            return ok(None, "Employee deleted")
        except NotFoundError as e:
            return fail(str(e), 404)
        except AuthorizationError as e:
            return fail(str(e), 403)
        except Exception:
            logger.exception("Failed to delete employee %s", employee_id)
            return fail("Failed to delete employee", 500)

    @app.route("/employee/by-url/<unique_url>", methods=["GET"], endpoint="api_employee_by_url")
    def employee_by_url(unique_url: str):
        """Public: the portal resolves cards through this endpoint."""
        try:
            employee = container.employee_service.get_by_unique_url(unique_url)
            return ok(employee.to_dict())
        except NotFoundError as e:
            return fail(str(e), 404)
        except Exception:
            logger.exception("Failed to load employee by url %s", unique_url)
            return fail("Failed to load employee", 500)

    @app.route("/employee/export/excel", methods=["GET"], endpoint="api_export_employees")
    @bearer_required
    def export_employees():
        try:
            content = rows_to_workbook(container.employee_service.export_rows(g.company_id))
        except Exception:
            logger.exception("Excel export failed for company %s", g.company_id)
            return fail("Failed to export employees", 500)

        return send_file(
            io.BytesIO(content),
            download_name=EMPLOYEE_EXPORT_FILENAME,
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )

    @app.route("/employee/import/excel", methods=["POST"], endpoint="api_import_employees")
    @bearer_required
    def import_employees():
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return fail("An Excel file is required", 400)
        try:
            rows = workbook_to_rows(upload.read())
            result = container.employee_service.import_rows(g.company_id, rows)
            message = f"Imported {len(result.imported)} employees"
            if result.limit_reached:
                message += "; the rest exceed the plan limit"
            return ok(result.to_dict(), message, 201)
        except ValidationError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Excel import failed for company %s", g.company_id)
            return fail("Failed to import employees", 500)
