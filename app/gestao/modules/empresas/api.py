from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from app.gestao.db import db_session
from app.gestao.modules.empresas.cnpj import ReceitaWSClient
from app.gestao.modules.empresas.service import (
    create_empresa,
    delete_empresa,
    get_empresa_or_404,
    list_empresas,
    serialize_empresa,
    update_empresa,
)

bp = Blueprint("empresas_api", __name__)


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


@bp.get("/empresas")
def empresas_list():
    s = db_session()
    return jsonify([serialize_empresa(e) for e in list_empresas(s)])


@bp.post("/empresas")
def empresas_create():
    s = db_session()
    empresa = create_empresa(s, _payload())
    s.commit()
    return jsonify({"id": empresa.id, "message": "Empresa criada com sucesso"}), 201


@bp.get("/empresas/<int:empresa_id>")
def empresa_detail(empresa_id: int):
    s = db_session()
    return jsonify(serialize_empresa(get_empresa_or_404(s, empresa_id)))


@bp.put("/empresas/<int:empresa_id>")
def empresa_update(empresa_id: int):
    s = db_session()
    empresa = get_empresa_or_404(s, empresa_id)
    update_empresa(s, empresa, _payload())
    s.commit()
    return jsonify({"message": "Empresa atualizada com sucesso"})


@bp.delete("/empresas/<int:empresa_id>")
def empresa_delete(empresa_id: int):
    s = db_session()
    empresa = get_empresa_or_404(s, empresa_id)
    delete_empresa(s, empresa)
    s.commit()
    return jsonify({"message": "Empresa excluída com sucesso"})


@bp.get("/consulta-cnpj/<cnpj>")
def consulta_cnpj(cnpj: str):
    client = ReceitaWSClient(base_url=current_app.config["RECEITAWS_BASE_URL"])
    return jsonify(client.consultar(cnpj))
