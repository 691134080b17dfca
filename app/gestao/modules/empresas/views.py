from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from app.gestao.db import db_session
from app.gestao.errors import ApiError
from app.gestao.modules.empresas.cnpj import formatar_cnpj
from app.gestao.modules.empresas.service import (
    create_empresa,
    delete_empresa,
    get_empresa_or_404,
    list_empresas,
    serialize_empresa,
    update_empresa,
)

bp = Blueprint("empresas", __name__)


def _render_form(empresa=None, values: dict | None = None, status_code: int = 200):
    if values is None:
        values = serialize_empresa(empresa) if empresa is not None else {}
        if values.get("cnpj"):
            values["cnpj"] = formatar_cnpj(values["cnpj"])
    return render_template("empresas/form.html", page="empresas", empresa=empresa, values=values), status_code


@bp.get("/")
def list_page():
    s = db_session()
    return render_template("empresas/list.html", page="empresas", empresas=list_empresas(s))


@bp.get("/nova")
def new_get():
    return _render_form()


@bp.post("/nova")
def new_post():
    s = db_session()
    values = request.form.to_dict()
    try:
        create_empresa(s, values)
        s.commit()
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
        return _render_form(values=values, status_code=400)
    flash("Empresa cadastrada com sucesso.", "success")
    return redirect(url_for("empresas.list_page"))


@bp.get("/<int:empresa_id>/editar")
def edit_get(empresa_id: int):
    s = db_session()
    return _render_form(empresa=get_empresa_or_404(s, empresa_id))


@bp.post("/<int:empresa_id>/editar")
def edit_post(empresa_id: int):
    s = db_session()
    empresa = get_empresa_or_404(s, empresa_id)
    values = request.form.to_dict()
    try:
        update_empresa(s, empresa, values)
        s.commit()
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
        return _render_form(empresa=empresa, values=values, status_code=400)
    flash("Empresa atualizada com sucesso.", "success")
    return redirect(url_for("empresas.list_page"))


@bp.post("/<int:empresa_id>/excluir")
def delete_post(empresa_id: int):
    s = db_session()
    empresa = get_empresa_or_404(s, empresa_id)
    try:
        delete_empresa(s, empresa)
        s.commit()
        flash("Empresa excluída.", "success")
    except ApiError as e:
        s.rollback()
        flash(e.message, "danger")
    return redirect(url_for("empresas.list_page"))
