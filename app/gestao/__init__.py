import logging
import uuid

from dotenv import load_dotenv
from flask import Flask, g, render_template, request
from sqlalchemy import inspect as sa_inspect

from app.gestao.config import load_config
from app.gestao.db import init_db, teardown_db_session
from app.gestao.errors import register_error_handlers

# Mapped classes must be registered before any blueprint module touches them.
from app.gestao import models as _models  # noqa: F401,E402

from app.gestao.routes import bp as routes_bp  # noqa: E402
from app.gestao.modules.dashboard.api import bp as dashboard_api_bp  # noqa: E402
from app.gestao.modules.dashboard.views import bp as dashboard_bp  # noqa: E402
from app.gestao.modules.documentos.api import bp as documentos_api_bp  # noqa: E402
from app.gestao.modules.documentos.views import bp as documentos_bp  # noqa: E402
from app.gestao.modules.empresas.api import bp as empresas_api_bp  # noqa: E402
from app.gestao.modules.empresas.views import bp as empresas_bp  # noqa: E402
from app.gestao.modules.responsaveis.api import bp as responsaveis_api_bp  # noqa: E402
from app.gestao.modules.responsaveis.views import bp as responsaveis_bp  # noqa: E402

EXPECTED_TABLES = ("empresas", "responsaveis", "documentos", "andamentos")


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_mapping(load_config())
    app.json.sort_keys = False  # type: ignore[attr-defined]

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    from app.gestao import vencimento
    from app.gestao.modules.empresas.cnpj import formatar_cnpj
    from app.gestao.security import csrf_exempt_path, ensure_csrf_token, validate_csrf
    from app.gestao.utils import formatar_data

    @app.context_processor
    def _inject_csrf() -> dict:
        return {"csrf_token": ensure_csrf_token()}

    @app.template_filter("dateformat")
    def _dateformat_filter(value, format: str = "%d/%m/%Y") -> str:
        return formatar_data(value, format)

    @app.template_filter("cnpj")
    def _cnpj_filter(value) -> str:
        return formatar_cnpj(value) if value else "—"

    @app.template_global("status_badge")
    def _status_badge(data_vencimento) -> dict:
        status = vencimento.status_vencimento(data_vencimento, vencimento.hoje())
        return {
            "status": status,
            "label": vencimento.LABELS[status],
            "css": vencimento.CSS_CLASSES[status],
            "dias": vencimento.dias_restantes(data_vencimento, vencimento.hoje()),
        }

    @app.before_request
    def _request_context():
        g.request_id = uuid.uuid4().hex
        if not request.path.startswith(("/static/", "/healthz")):
            app.logger.info("%s %s request_id=%s", request.method, request.path, g.request_id)

    @app.before_request
    def _csrf_guard():
        if csrf_exempt_path(request.path):
            return None
        ensure_csrf_token()
        if request.method in ("POST", "PUT", "PATCH", "DELETE") and not validate_csrf(request):
            return render_template("errors/400.html", message="Token CSRF ausente ou inválido."), 400
        return None

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        import os

        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(dashboard_api_bp, url_prefix="/api")
    app.register_blueprint(documentos_api_bp, url_prefix="/api")
    app.register_blueprint(empresas_api_bp, url_prefix="/api")
    app.register_blueprint(responsaveis_api_bp, url_prefix="/api")
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(documentos_bp, url_prefix="/documentos")
    app.register_blueprint(empresas_bp, url_prefix="/empresas")
    app.register_blueprint(responsaveis_bp, url_prefix="/responsaveis")

    app.teardown_appcontext(teardown_db_session)
    register_error_handlers(app)

    # Startup check: log missing tables instead of failing on the first request.
    try:
        insp = sa_inspect(app.extensions["sqlalchemy_engine"])
        missing = [t for t in EXPECTED_TABLES if not insp.has_table(t)]
        if missing:
            app.logger.warning("Database is missing tables %s; run `alembic upgrade head`.", ", ".join(missing))
    except Exception as e:
        app.logger.error("Could not inspect database schema: %s", e)

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")
    return app
