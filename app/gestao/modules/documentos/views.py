from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from app.gestao import uploads, vencimento
from app.gestao.db import db_session
from app.gestao.errors import ApiError
from app.gestao.modules.documentos.service import (
    FILTROS_STATUS,
    STATUS_GERAL,
    STATUS_GERAL_LABELS,
    TIPOS_DOCUMENTO,
    commit_or_discard,
    create_andamento,
    create_documento,
    delete_documento,
    get_documento_or_404,
    list_andamentos,
    list_documentos,
    update_documento,
    update_status_geral,
)
from app.gestao.modules.empresas.service import list_empresas
from app.gestao.modules.responsaveis.service import list_responsaveis
from app.gestao.storage import documentos_storage
from app.gestao.utils import clean, iso

bp = Blueprint("documentos", __name__)


def _render_form(documento=None, values: dict | None = None, status_code: int = 200):
    s = db_session()
    if values is None:
        values = {}
        if documento is not None:
            values = {
                "nome": documento.nome,
                "tipo": documento.tipo,
                "empresa_id": str(documento.empresa_id),
                "responsavel_id": str(documento.responsavel_id),
                "data_emissao": iso(documento.data_emissao),
                "data_vencimento": iso(documento.data_vencimento),
                "observacoes": documento.observacoes or "",
            }
    return (
        render_template(
            "documentos/form.html",
            page="documentos",
            documento=documento,
            values=values,
            empresas=list_empresas(s),
            responsaveis=list_responsaveis(s),
            tipos=TIPOS_DOCUMENTO,
        ),
        status_code,
    )


@bp.get("/")
def list_page():
    s = db_session()
    filtros = {
        "status": clean(request.args.get("status")),
        "search": clean(request.args.get("search")),
        "empresa_id": clean(request.args.get("empresa_id")),
    }
    if filtros["status"] not in FILTROS_STATUS:
        filtros["status"] = ""
    empresa_id = int(filtros["empresa_id"]) if filtros["empresa_id"].isdigit() else None
    documentos = list_documentos(
        s,
        status=filtros["status"] or None,
        search=filtros["search"],
        empresa_id=empresa_id,
        referencia=vencimento.hoje(),
    )
    return render_template(
        "documentos/list.html",
        page="documentos",
        documentos=documentos,
        filtros=filtros,
        empresas=list_empresas(s),
    )


@bp.get("/novo")
def new_get():
    return _render_form()


@bp.post("/novo")
def new_post():
    s = db_session()
    storage = documentos_storage(current_app.config)
    values = request.form.to_dict()
    try:
        upload = uploads.read_upload(request.files.get(uploads.FIELD_NAME))
        d = create_documento(s, values, upload, storage)
        commit_or_discard(s, storage, d.arquivo_path)
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
        return _render_form(values=values, status_code=400)
    flash("Documento cadastrado com sucesso.", "success")
    return redirect(url_for("documentos.detail", documento_id=d.id))


@bp.get("/<int:documento_id>")
def detail(documento_id: int):
    s = db_session()
    d = get_documento_or_404(s, documento_id)
    return render_template(
        "documentos/detail.html",
        page="documentos",
        documento=d,
        andamentos=list_andamentos(s, d),
        responsaveis=list_responsaveis(s),
        status_geral=STATUS_GERAL,
        status_labels=STATUS_GERAL_LABELS,
    )


@bp.get("/<int:documento_id>/editar")
def edit_get(documento_id: int):
    s = db_session()
    return _render_form(documento=get_documento_or_404(s, documento_id))


@bp.post("/<int:documento_id>/editar")
def edit_post(documento_id: int):
    s = db_session()
    storage = documentos_storage(current_app.config)
    d = get_documento_or_404(s, documento_id)
    values = request.form.to_dict()
    try:
        upload = uploads.read_upload(request.files.get(uploads.FIELD_NAME))
        stored_name = update_documento(s, d, values, upload, storage)
        commit_or_discard(s, storage, stored_name)
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
        return _render_form(documento=d, values=values, status_code=400)
    flash("Documento atualizado com sucesso.", "success")
    return redirect(url_for("documentos.detail", documento_id=d.id))


@bp.post("/<int:documento_id>/status")
def status_post(documento_id: int):
    s = db_session()
    d = get_documento_or_404(s, documento_id)
    try:
        update_status_geral(s, d, request.form.get("status_geral") or "")
        s.commit()
        flash("Status atualizado.", "success")
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
    return redirect(url_for("documentos.detail", documento_id=documento_id))


@bp.post("/<int:documento_id>/andamentos")
def andamento_post(documento_id: int):
    s = db_session()
    d = get_documento_or_404(s, documento_id)
    try:
        create_andamento(s, d, request.form.to_dict())
        s.commit()
        flash("Andamento registrado.", "success")
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
    return redirect(url_for("documentos.detail", documento_id=documento_id))


@bp.post("/<int:documento_id>/excluir")
def delete_post(documento_id: int):
    s = db_session()
    d = get_documento_or_404(s, documento_id)
    delete_documento(s, d, documentos_storage(current_app.config))
    s.commit()
    flash("Documento excluído.", "success")
    return redirect(url_for("documentos.list_page"))
