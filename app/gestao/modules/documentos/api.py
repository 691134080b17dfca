from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request, send_file

from app.gestao import uploads, vencimento
from app.gestao.db import db_session
from app.gestao.errors import ValidationError
from app.gestao.modules.documentos.service import (
    TIPOS_DOCUMENTO,
    commit_or_discard,
    create_andamento,
    create_documento,
    delete_documento,
    get_documento_or_404,
    list_andamentos,
    list_documentos,
    resolve_download,
    serialize_andamento,
    serialize_documento,
    update_documento,
    update_status_geral,
)
from app.gestao.storage import documentos_storage
from app.gestao.utils import clean, parse_id

bp = Blueprint("documentos_api", __name__)


def _storage():
    return documentos_storage(current_app.config)


def _json_payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


@bp.get("/documentos")
def documentos_list():
    s = db_session()
    agora = vencimento.hoje()
    return jsonify([serialize_documento(d, agora=agora) for d in list_documentos(s, referencia=agora)])


@bp.get("/documentos/filtros")
def documentos_filtros():
    s = db_session()
    agora = vencimento.hoje()
    empresa_id = clean(request.args.get("empresa_id"))
    docs = list_documentos(
        s,
        status=clean(request.args.get("status")) or None,
        search=request.args.get("search"),
        empresa_id=parse_id(empresa_id, "empresa_id") if empresa_id else None,
        referencia=agora,
    )
    return jsonify([serialize_documento(d, agora=agora) for d in docs])


@bp.get("/documentos/tipos")
def documentos_tipos():
    return jsonify({"grupos": {k: list(v) for k, v in TIPOS_DOCUMENTO.items()}})


@bp.get("/documentos/<int:documento_id>")
def documento_detail(documento_id: int):
    s = db_session()
    return jsonify(serialize_documento(get_documento_or_404(s, documento_id), detalhado=True))


@bp.post("/documentos")
def documentos_create():
    s = db_session()
    storage = _storage()
    upload = uploads.read_upload(request.files.get(uploads.FIELD_NAME))
    d = create_documento(s, request.form.to_dict(), upload, storage)
    commit_or_discard(s, storage, d.arquivo_path)
    return jsonify(serialize_documento(d)), 201


@bp.put("/documentos/<int:documento_id>")
def documento_update(documento_id: int):
    s = db_session()
    storage = _storage()
    d = get_documento_or_404(s, documento_id)
    upload = uploads.read_upload(request.files.get(uploads.FIELD_NAME))
    stored_name = update_documento(s, d, request.form.to_dict(), upload, storage)
    commit_or_discard(s, storage, stored_name)
    return jsonify({"message": "Documento atualizado com sucesso", "id": d.id})


@bp.put("/documentos/<int:documento_id>/status")
def documento_status(documento_id: int):
    s = db_session()
    d = get_documento_or_404(s, documento_id)
    status = _json_payload().get("status_geral")
    if not clean(status):
        raise ValidationError("Status é obrigatório", extra={"field": "status_geral"})
    update_status_geral(s, d, status)
    s.commit()
    return jsonify({"message": "Status atualizado com sucesso", "id": d.id, "status_geral": d.status_geral})


@bp.delete("/documentos/<int:documento_id>")
def documento_delete(documento_id: int):
    s = db_session()
    d = get_documento_or_404(s, documento_id)
    delete_documento(s, d, _storage())
    s.commit()
    return jsonify({"message": "Documento excluído com sucesso"})


@bp.get("/documentos/<int:documento_id>/download")
def documento_download(documento_id: int):
    s = db_session()
    d = get_documento_or_404(s, documento_id)
    path, name = resolve_download(d, _storage())
    return send_file(path, as_attachment=True, download_name=name, max_age=0)


@bp.get("/documentos/<int:documento_id>/andamentos")
def andamentos_list(documento_id: int):
    s = db_session()
    d = get_documento_or_404(s, documento_id)
    return jsonify([serialize_andamento(a) for a in list_andamentos(s, d)])


@bp.post("/documentos/<int:documento_id>/andamentos")
def andamentos_create(documento_id: int):
    s = db_session()
    d = get_documento_or_404(s, documento_id)
    a = create_andamento(s, d, _json_payload())
    s.commit()
    return jsonify({**serialize_andamento(a), "message": "Andamento registrado com sucesso"}), 201
