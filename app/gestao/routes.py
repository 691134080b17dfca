from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, send_from_directory

from app.gestao.storage import documentos_storage

bp = Blueprint("routes", __name__)


@bp.get("/api/health")
def health():
    """Health check endpoint. Returns JSON."""
    return jsonify(
        {
            "status": "OK",
            "message": "Servidor funcionando",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )


@bp.get("/healthz")
def healthz():
    """
    Fast health check for the load balancer. No DB access.
    """
    return "ok", 200


@bp.get("/uploads/documentos/<path:name>")
def uploaded_file(name: str):
    """Read-only access to stored document attachments."""
    storage = documentos_storage(current_app.config)
    return send_from_directory(storage.root, name, max_age=0)
