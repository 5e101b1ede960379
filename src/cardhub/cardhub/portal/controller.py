from __future__ import annotations

import io
import logging
from functools import wraps

from flask import Flask, flash, g, redirect, render_template, request, send_file, session, url_for

from ..core.constants import (
    CARD_LOAD_FAILED_MESSAGE,
    CARD_NOT_FOUND_MESSAGE,
    DEFAULT_TEMPLATE,
    EMPLOYEE_EXPORT_FILENAME,
    EXPORT_FAILED_MESSAGE,
    LOGIN_REQUIRED_MESSAGE,
    USAGE_LOAD_FAILED_MESSAGE,
    XLSX_MIMETYPE,
)
from ..core.exceptions import AuthenticationError, NotFoundError, UpstreamUnavailableError, ValidationError
from ..employees.model import EDITABLE_FIELDS
from .container import PortalContainer
from .context import PortalContext, RequestMeta

logger = logging.getLogger(__name__)


def _employee_form() -> dict:
    payload = {name: request.form[name] for name in EDITABLE_FIELDS if name in request.form}
    if request.form.get("uniqueUrl"):
        payload["uniqueUrl"] = request.form["uniqueUrl"]
    return payload


def register(app: Flask, container: PortalContainer) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            ctx = PortalContext.from_session(session)
            if ctx is None:
                flash(LOGIN_REQUIRED_MESSAGE, "warning")
                return redirect(url_for("login"))
            g.portal_ctx = ctx
            try:
                return view(*args, **kwargs)
            except AuthenticationError:
                session.clear()
                flash("Your session has expired, please log in again.", "warning")
                return redirect(url_for("login"))

        return wrapper

    @app.route("/", endpoint="home")
    def home():
        if PortalContext.from_session(session):
            return redirect(url_for("usage"))
        return redirect(url_for("login"))

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if request.method == "POST":
            return login_company()
        return render_template("portal/login.html")

    @app.route("/login-company", methods=["POST"], endpoint="login_company")
    def login_company():
        email = request.form.get("email", "")
        logger.info("Login attempt for %s", email)
        try:
            outcome = container.auth_service.login(email, request.form.get("password", ""))
            session.clear()
            outcome.context.save(session)
            return redirect(url_for(outcome.next_endpoint))
        except (AuthenticationError, ValidationError) as e:
            flash(str(e), "danger")
        except UpstreamUnavailableError as e:
            logger.error("Login failed for %s: %s", email, e)
            flash("Login failed, please try again later.", "danger")
        return redirect(url_for("login"))

    @app.route("/logout", endpoint="logout")
    def logout():
        ctx = PortalContext.from_session(session)
        if ctx:
            try:
                container.backend.logout(ctx)
            except (AuthenticationError, UpstreamUnavailableError) as e:
                logger.warning("Backend logout failed for company %s: %s", ctx.company_id, e)
        session.clear()
        flash("Logged out.", "info")
        return redirect(url_for("login"))

    @app.route("/register", methods=["GET"], endpoint="register")
    def register_form():
        return render_template("portal/register.html")

    @app.route("/register-company", methods=["POST"], endpoint="register_company")
    def register_company():
        fields = ("name", "email", "password", "phone", "logoUrl", "description")
        payload = {name: request.form.get(name, "") for name in fields}
        try:
            container.backend.register_company(payload)
            flash("Company registered, you can log in now.", "success")
            return redirect(url_for("login"))
        except UpstreamUnavailableError as e:
            logger.error("Company registration failed: %s", e)
            flash("Registration failed.", "danger")
            return redirect(url_for("register"))

    @app.route("/plans", methods=["GET"], endpoint="plans")
    @login_required
    def plans():
        try:
            plan_list = container.backend.list_plans()
        except UpstreamUnavailableError as e:
            logger.exception("Failed to load plans: %s", e)
            return "Failed to load plans", 502
        return render_template("portal/plans.html", plans=plan_list, company_id=g.portal_ctx.company_id)

    @app.route("/subscribe", methods=["POST"], endpoint="subscribe")
    @login_required
    def subscribe():
        try:
            plan_id = int(request.form.get("planId") or 0)
            result = container.backend.subscribe(g.portal_ctx, plan_id)
        except ValueError:
            flash("Pick a plan first.", "warning")
            return redirect(url_for("plans"))
        except UpstreamUnavailableError as e:
            logger.error("Subscription failed for company %s: %s", g.portal_ctx.company_id, e)
            flash("Subscription failed.", "danger")
            return redirect(url_for("plans"))

        if result.get("redirectToDashboard"):
            return redirect(url_for("usage"))
        flash(result.get("message") or "Payment required", "info")
        return redirect(url_for("plans"))

    @app.route("/usage", methods=["GET"], endpoint="usage")
    @login_required
    def usage():
        ctx = g.portal_ctx
        logger.info("Company %s: loading usage dashboard", ctx.company_id)
        try:
            view = container.usage_service.build(ctx)
        except UpstreamUnavailableError as e:
            logger.exception("Usage dashboard failed for company %s: %s", ctx.company_id, e)
            return USAGE_LOAD_FAILED_MESSAGE, 502
        return render_template("portal/usage.html", usage=view, active_page="usage")

    @app.route("/add-employee", methods=["POST"], endpoint="add_employee")
    @login_required
    def add_employee():
        try:
            container.backend.create_employee(g.portal_ctx, _employee_form())
            flash("Employee added.", "success")
        except UpstreamUnavailableError as e:
            logger.error("Adding employee failed: %s", e)
            flash("Failed to add employee.", "danger")
        return redirect(url_for("usage"))

    @app.route("/update-employee", methods=["POST"], endpoint="update_employee")
    @login_required
    def update_employee():
        try:
            employee_id = int(request.form.get("id") or 0)
            container.backend.update_employee(g.portal_ctx, employee_id, _employee_form())
            flash("Employee updated.", "success")
        except (ValueError, UpstreamUnavailableError) as e:
            logger.error("Updating employee failed: %s", e)
            flash("Failed to update employee.", "danger")
        return redirect(url_for("usage"))

    @app.route("/delete-employee", methods=["POST"], endpoint="delete_employee")
    @login_required
    def delete_employee():
        try:
            container.backend.delete_employee(g.portal_ctx, int(request.form.get("id") or 0))
            flash("Employee deleted.", "success")
        except (ValueError, UpstreamUnavailableError) as e:
            logger.error("Deleting employee failed: %s", e)
            flash("Failed to delete employee.", "danger")
        return redirect(url_for("usage"))

    @app.route("/import-employees", methods=["POST"], endpoint="import_employees")
    @login_required
    def import_employees():
        upload = request.files.get("excelFile")
        if upload is None or not upload.filename:
            flash("No Excel file was uploaded.", "warning")
            return redirect(url_for("usage"))
        try:
            result = container.backend.import_employees(g.portal_ctx, upload.filename, upload.read())
            summary = result.get("summary") or {}
            flash(
                f"Imported {summary.get('totalImported', 0)} employees, skipped {summary.get('totalSkipped', 0)}.",
                "success",
            )
        except UpstreamUnavailableError as e:
            logger.error("Importing employees failed: %s", e)
            flash("Failed to import employees.", "danger")
        return redirect(url_for("usage"))

    @app.route("/export-employees", methods=["GET"], endpoint="export_employees")
    @login_required
    def export_employees():
        try:
            content = container.backend.export_employees(g.portal_ctx)
        except UpstreamUnavailableError as e:
            logger.exception("Exporting employees failed: %s", e)
            return EXPORT_FAILED_MESSAGE, 502

        return send_file(
            io.BytesIO(content),
            download_name=EMPLOYEE_EXPORT_FILENAME,
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )

    @app.route("/<design_id>/<unique_url>", methods=["GET"], endpoint="card")
    def card(design_id: str, unique_url: str):
        try:
            resolved = container.card_service.open_card(design_id, unique_url, RequestMeta.from_request(request))
        except NotFoundError:
            return CARD_NOT_FOUND_MESSAGE, 404
        except Exception as e:
            logger.exception("Failed to load card %s/%s: %s", design_id, unique_url, e)
            return CARD_LOAD_FAILED_MESSAGE, 500

        # Designs without a template file render with the default one.
        return render_template(
            [f"cards/{resolved.template_id}.html", f"cards/{DEFAULT_TEMPLATE}.html"],
            employee=resolved.employee,
            template_id=resolved.template_id,
        )
