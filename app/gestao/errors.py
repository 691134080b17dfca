"""
API error taxonomy.

Service functions raise these; the JSON blueprints let them propagate to the
handlers registered here, while the HTML views catch them and flash the
message instead.
"""
from __future__ import annotations

from typing import Any

from flask import Flask, flash, g, jsonify, redirect, render_template, request, url_for


class ApiError(Exception):
    status_code = 400

    def __init__(self, message: str, *, extra: dict[str, Any] | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


class ValidationError(ApiError):
    status_code = 400


class ReferentialError(ApiError):
    """A referenced company or responsible person is missing, or a delete would orphan rows."""

    status_code = 400


class NotFound(ApiError):
    status_code = 404


class UploadError(ApiError):
    status_code = 400


class CnpjLookupError(ApiError):
    status_code = 502


MISSING_FIELDS_MESSAGE = "Preencha todos os campos obrigatórios"
FILE_TOO_LARGE_MESSAGE = "Arquivo muito grande. Tamanho máximo: 10MB"


def missing_fields_error(missing: dict[str, bool]) -> ValidationError:
    return ValidationError(MISSING_FIELDS_MESSAGE, extra={"missing": missing})


def _wants_json() -> bool:
    return request.path.startswith("/api/")


def _flash_back(message: str):
    flash(message, "danger")
    referrer = request.referrer
    if referrer and referrer.startswith(request.host_url):
        return redirect(referrer), 302
    return redirect(url_for("dashboard.index")), 302


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def _api_error(e: ApiError):  # type: ignore[no-redef]
        app.logger.warning(
            "%s %s -> %s %s (request_id=%s)",
            request.method,
            request.path,
            e.status_code,
            e.message,
            getattr(g, "request_id", None),
        )
        if _wants_json():
            return jsonify(e.to_dict()), e.status_code
        if e.status_code == 404:
            return render_template("errors/404.html", message=e.message), 404
        return _flash_back(e.message)

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        if _wants_json():
            return jsonify({"error": "Rota não encontrada"}), 404
        return render_template("errors/404.html"), 404

    @app.errorhandler(405)
    def _err_405(e):  # type: ignore[no-redef]
        if _wants_json():
            return jsonify({"error": "Método não permitido"}), 405
        return render_template("errors/404.html"), 405

    @app.errorhandler(413)
    def _err_413(e):  # type: ignore[no-redef]
        # Body above MAX_CONTENT_LENGTH: reported like the per-file limit.
        if _wants_json():
            return jsonify({"error": FILE_TOO_LARGE_MESSAGE}), 400
        return _flash_back(FILE_TOO_LARGE_MESSAGE)

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        rid = getattr(g, "request_id", None)
        original = getattr(e, "original_exception", None) or e
        app.logger.error("Unhandled 500 (request_id=%s): %s", rid, original, exc_info=original)
        if _wants_json():
            body: dict[str, Any] = {"error": "Erro interno do servidor"}
            if (app.config.get("ENV") or "").lower() not in ("prod", "production"):
                body["details"] = str(original)
            return jsonify(body), 500
        return render_template("errors/500.html", request_id=rid), 500
