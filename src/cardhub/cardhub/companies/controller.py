from __future__ import annotations

import logging

from flask import Flask, g, request

from ..common.http import bearer_token, fail, make_bearer_required, ok
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    bearer_required = make_bearer_required(container.company_service.resolve_token)

    @app.route("/company", methods=["POST"], endpoint="api_register_company")
    def register_company():
        body = request.get_json(silent=True) or {}
        try:
            company_id = container.company_service.register(
                name=body.get("name", ""),
                email=body.get("email", ""),
                password=body.get("password", ""),
                phone=body.get("phone"),
                logo_url=body.get("logoUrl"),
                description=body.get("description"),
            )
            return ok({"id": company_id}, "Company registered", 201)
        except ValidationError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Company registration failed")
            return fail("Company registration failed", 500)

    @app.route("/company/login", methods=["POST"], endpoint="api_login_company")
    def login_company():
        body = request.get_json(silent=True) or {}
        try:
            issued = container.company_service.authenticate(body.get("email", ""), body.get("password", ""))
            return ok(
                {
                    "accessToken": issued.access_token,
                    "companyId": issued.company_id,
                    "expiresAt": issued.expires_at.isoformat(),
                },
                "Logged in",
            )
        except AuthenticationError as e:
            return fail(str(e), 401)
        except Exception:
            logger.exception("Company login failed")
            return fail("Login failed", 500)

    @app.route("/company/logout", methods=["POST"], endpoint="api_logout_company")
    @bearer_required
    def logout_company():
        container.company_service.logout(bearer_token())
        return ok(None, "Logged out")

    @app.route("/company/profile", methods=["GET"], endpoint="api_company_profile")
    @bearer_required
    def company_profile():
        try:
            company = container.company_service.get_profile(g.company_id)
            return ok(company.to_public_dict())
        except NotFoundError as e:
            return fail(str(e), 404)

    @app.route("/company/<int:company_id>", methods=["GET"], endpoint="api_get_company")
    @bearer_required
    def get_company(company_id: int):
        try:
            if company_id != g.company_id:
                raise AuthorizationError("You can only read your own company")
            company = container.company_service.get_profile(company_id)
            return ok(company.to_public_dict())
        except AuthorizationError as e:
            return fail(str(e), 403)
        except NotFoundError as e:
            return fail(str(e), 404)
