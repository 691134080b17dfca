from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.gestao.db import db_session
from app.gestao.modules.responsaveis.service import (
    create_responsavel,
    delete_responsavel,
    get_responsavel_or_404,
    list_responsaveis,
    serialize_responsavel,
    update_responsavel,
)

bp = Blueprint("responsaveis_api", __name__)


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


@bp.get("/responsaveis")
def responsaveis_list():
    s = db_session()
    return jsonify([serialize_responsavel(r) for r in list_responsaveis(s)])


@bp.post("/responsaveis")
def responsaveis_create():
    s = db_session()
    r = create_responsavel(s, _payload())
    s.commit()
    return jsonify({**serialize_responsavel(r), "message": "Responsável criado com sucesso"}), 201


@bp.get("/responsaveis/<int:responsavel_id>")
def responsavel_detail(responsavel_id: int):
    s = db_session()
    return jsonify(serialize_responsavel(get_responsavel_or_404(s, responsavel_id)))


@bp.put("/responsaveis/<int:responsavel_id>")
def responsavel_update(responsavel_id: int):
    s = db_session()
    r = get_responsavel_or_404(s, responsavel_id)
    update_responsavel(s, r, _payload())
    s.commit()
    return jsonify({**serialize_responsavel(r), "message": "Responsável atualizado com sucesso"})


@bp.delete("/responsaveis/<int:responsavel_id>")
def responsavel_delete(responsavel_id: int):
    s = db_session()
    r = get_responsavel_or_404(s, responsavel_id)
    delete_responsavel(s, r)
    s.commit()
    return jsonify({"message": "Responsável excluído com sucesso"})
