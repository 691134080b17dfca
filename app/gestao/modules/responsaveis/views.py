from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from app.gestao.db import db_session
from app.gestao.errors import ApiError
from app.gestao.modules.empresas.service import list_empresas
from app.gestao.modules.responsaveis.service import (
    FUNCOES,
    create_responsavel,
    delete_responsavel,
    get_responsavel_or_404,
    list_responsaveis,
    update_responsavel,
)

bp = Blueprint("responsaveis", __name__)


def _render_form(responsavel=None, values: dict | None = None, status_code: int = 200):
    s = db_session()
    if values is None:
        values = {}
        if responsavel is not None:
            values = {
                "nome": responsavel.nome,
                "email": responsavel.email,
                "telefone": responsavel.telefone,
                "funcao": responsavel.funcao,
                "empresa_id": str(responsavel.empresa_id or ""),
            }
    return (
        render_template(
            "responsaveis/form.html",
            page="responsaveis",
            responsavel=responsavel,
            values=values,
            empresas=list_empresas(s),
            funcoes=FUNCOES,
        ),
        status_code,
    )


@bp.get("/")
def list_page():
    s = db_session()
    return render_template("responsaveis/list.html", page="responsaveis", responsaveis=list_responsaveis(s))


@bp.get("/novo")
def new_get():
    return _render_form()


@bp.post("/novo")
def new_post():
    s = db_session()
    values = request.form.to_dict()
    try:
        create_responsavel(s, values)
        s.commit()
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
        return _render_form(values=values, status_code=400)
    flash("Responsável cadastrado com sucesso.", "success")
    return redirect(url_for("responsaveis.list_page"))


@bp.get("/<int:responsavel_id>/editar")
def edit_get(responsavel_id: int):
    s = db_session()
    return _render_form(responsavel=get_responsavel_or_404(s, responsavel_id))


@bp.post("/<int:responsavel_id>/editar")
def edit_post(responsavel_id: int):
    s = db_session()
    responsavel = get_responsavel_or_404(s, responsavel_id)
    values = request.form.to_dict()
    try:
        update_responsavel(s, responsavel, values)
        s.commit()
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
        return _render_form(responsavel=responsavel, values=values, status_code=400)
    flash("Responsável atualizado com sucesso.", "success")
    return redirect(url_for("responsaveis.list_page"))


@bp.post("/<int:responsavel_id>/excluir")
def delete_post(responsavel_id: int):
    s = db_session()
    responsavel = get_responsavel_or_404(s, responsavel_id)
    try:
        delete_responsavel(s, responsavel)
        s.commit()
        flash("Responsável excluído.", "success")
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
    return redirect(url_for("responsaveis.list_page"))
