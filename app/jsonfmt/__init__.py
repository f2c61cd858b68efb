import logging
import os
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, g, request, session
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError

from app.jsonfmt.config import load_config
from app.jsonfmt.db import init_db, teardown_db_session
from app.jsonfmt.errors import ActionError, register_error_handlers
from app.jsonfmt.routes import bp as routes_bp
from app.jsonfmt.auth import bp as auth_bp, load_current_user
from app.jsonfmt.modules.snippets.actions import bp as snippets_bp
from app.jsonfmt.modules.format_operations.actions import bp as format_operations_bp
from app.jsonfmt.modules.transform_recipes.actions import bp as transform_recipes_bp

# table -> columns the code expects
EXPECTED_SCHEMA = {
    "users": ("id", "email", "is_active"),
    "json_snippets": (
        "id",
        "user_id",
        "label",
        "raw_json",
        "is_valid",
        "validation_error",
        "created_at",
        "last_used_at",
    ),
    "json_format_operations": (
        "id",
        "snippet_id",
        "user_id",
        "operation_type",
        "settings_json",
        "result_json",
        "created_at",
    ),
    "json_transform_recipes": (
        "id",
        "user_id",
        "name",
        "description",
        "config_json",
        "created_at",
        "updated_at",
    ),
}


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=8)
    app.config["SESSION_REFRESH_EACH_REQUEST"] = True
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(snippets_bp, url_prefix="/api")
    app.register_blueprint(format_operations_bp, url_prefix="/api")
    app.register_blueprint(transform_recipes_bp, url_prefix="/api")
    register_error_handlers(app)

    # Session user first: the CSRF guard only applies to signed-in callers.
    app.before_request(load_current_user)

    @app.before_request
    def _csrf_guard():
        from app.jsonfmt.security import ensure_csrf_token, validate_csrf

        if request.path.startswith(("/health", "/healthz")):
            return None
        session.permanent = True
        if not app.config.get("CSRF_ENABLED"):
            return None
        if not getattr(g, "current_user", None):
            return None
        ensure_csrf_token()
        if request.method in ("POST", "PUT", "PATCH", "DELETE") and not validate_csrf(request):
            raise ActionError("FORBIDDEN", "CSRF token missing or invalid.")
        return None

    app.teardown_appcontext(teardown_db_session)

    # Migration health (lean): detect drift between code expectations and DB schema.
    app.config.setdefault("_schema_health_ok", False)
    app.config.setdefault("_schema_health_missing", [])
    app.config.setdefault("_schema_health_logged", False)

    def _run_schema_health_check() -> None:
        missing: list[str] = []
        try:
            engine = app.extensions.get("sqlalchemy_engine")
            if engine is None:
                raise RuntimeError("sqlalchemy_engine not initialized")
            insp = sa_inspect(engine)
            for table, columns in EXPECTED_SCHEMA.items():
                if not insp.has_table(table):
                    missing.append(f"{table} (table)")
                    continue
                cols = {c["name"] for c in insp.get_columns(table)}
                missing.extend(f"{table}.{col}" for col in columns if col not in cols)
        except (SQLAlchemyError, RuntimeError) as e:
            app.logger.exception("Schema health check failed: %s", e)
            missing.append("(schema inspection failed)")

        app.config["_schema_health_missing"] = missing
        app.config["_schema_health_ok"] = not missing
        if missing and not app.config.get("_schema_health_logged"):
            app.config["_schema_health_logged"] = True
            app.logger.error("DB schema out of date; run `alembic upgrade head`. Missing: %s", ", ".join(missing))

    app.extensions["schema_health_check"] = _run_schema_health_check

    @app.before_request
    def _schema_health_guardrail():  # type: ignore[no-redef]
        if not request.path.startswith("/api"):
            return None
        if not app.config.get("_schema_health_ok"):
            _run_schema_health_check()
        if app.config.get("_schema_health_ok"):
            return None
        raise ActionError(
            "INTERNAL_SERVER_ERROR",
            "Database schema is out of date.",
            issues=list(app.config.get("_schema_health_missing") or []),
        )

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
