from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_setup import configure_logging
from .core.constants import DEFAULT_TOKEN_TTL_HOURS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_company, list_tables

from .container import Container, build_container
from .companies.controller import register as register_companies
from .employees.controller import register as register_employees
from .subscriptions.controller import register as register_subscriptions
from .visits.controller import register as register_visits
from .portal.container import PortalContainer, build_portal_container
from .portal.controller import register as register_portal

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]
TEMPLATE_FOLDER = "../../../templates"


def _load_settings():
    load_dotenv(override=False)
    settings_module = get_settings_module()
    return settings_module, importlib.import_module(settings_module)


def create_app(*, container: Container | None = None) -> Flask:
    """JSON API backend: companies, plans, employees and visits."""
    settings_module, settings = _load_settings()
    configure_logging("cardhub-api")

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_company(db_config)
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            token_ttl_hours=int(getattr(settings, "TOKEN_TTL_HOURS", DEFAULT_TOKEN_TTL_HOURS)),
        )

    register_companies(app, container)
    register_subscriptions(app, container)
    register_employees(app, container)
    register_visits(app, container)

    return app


def create_portal_app(*, container: PortalContainer | None = None) -> Flask:
    """Server-rendered company portal plus the public card pages."""
    settings_module, settings = _load_settings()
    configure_logging("cardhub-portal")

    app = Flask(__name__, template_folder=TEMPLATE_FOLDER)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        backend_url = str(getattr(settings, "BACKEND_URL", "http://localhost:3000"))
        logger.info("settings=%s backend=%s", settings_module, backend_url)
        container = build_portal_container(
            backend_url=backend_url,
            timeout=float(getattr(settings, "BACKEND_TIMEOUT", 10.0)),
            visit_workers=int(getattr(settings, "VISIT_WORKERS", 4)),
            aggregate_workers=int(getattr(settings, "AGGREGATE_WORKERS", 8)),
        )

    register_portal(app, container)
    app.extensions["cardhub_portal"] = container

    return app
