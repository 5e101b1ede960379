from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g

from ..common.http import fail, make_bearer_required, ok
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    bearer_required = make_bearer_required(container.company_service.resolve_token)

    def own_company_only(view):
        @wraps(view)
        def wrapper(company_id: int, *args, **kwargs):
            if company_id != g.company_id:
                return fail("You can only access your own company", 403)
            return view(company_id, *args, **kwargs)

        return wrapper

    @app.route("/plans", methods=["GET"], endpoint="api_list_plans")
    def list_plans():
        try:
            plans = container.subscription_service.list_plans()
            return ok([p.to_dict() for p in plans])
        except Exception:
            logger.exception("Failed to load plans")
            return fail("Failed to load plans", 500)

    @app.route("/company/<int:company_id>/subscription", methods=["GET"], endpoint="api_company_subscription")
    @bearer_required
    @own_company_only
    def company_subscription(company_id: int):
        try:
            subscription = container.subscription_service.get_current(company_id)
            if not subscription:
                return ok(None, "No subscription")
            return ok(subscription.to_dict())
        except Exception:
            logger.exception("Failed to load subscription for company %s", company_id)
            return fail("Failed to load subscription", 500)

    @app.route(
        "/company/<int:company_id>/subscribe/<int:plan_id>",
        methods=["POST"],
        endpoint="api_subscribe",
    )
    @bearer_required
    @own_company_only
    def subscribe(company_id: int, plan_id: int):
        try:
            result = container.subscription_service.subscribe(company_id=company_id, plan_id=plan_id)
            return ok(result.to_dict(), result.message, 201 if result.subscription else 200)
        except NotFoundError as e:
            return fail(str(e), 404)
        except ValidationError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Subscription failed for company %s plan %s", company_id, plan_id)
            return fail("Subscription failed", 500)

    @app.route("/company/<int:company_id>/usage", methods=["GET"], endpoint="api_company_usage")
    @bearer_required
    @own_company_only
    def company_usage(company_id: int):
        try:
            return ok(container.subscription_service.get_usage(company_id).to_dict())
        except Exception:
            logger.exception("Failed to compute usage for company %s", company_id)
            return fail("Failed to compute usage", 500)
