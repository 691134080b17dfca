from __future__ import annotations

from flask import Blueprint, jsonify

from app.gestao.db import db_session
from app.gestao.modules.dashboard import service

bp = Blueprint("dashboard_api", __name__)


@bp.get("/dashboard")
def dashboard():
    return jsonify(service.dashboard(db_session()))


@bp.get("/dashboard/estatisticas")
def dashboard_estatisticas():
    return jsonify(service.estatisticas(db_session()))


@bp.get("/alertas")
def alertas():
    return jsonify(service.alertas(db_session()))


@bp.get("/calendario/<int:ano>/<int:mes>")
def calendario(ano: int, mes: int):
    return jsonify(service.calendario(db_session(), ano, mes))
