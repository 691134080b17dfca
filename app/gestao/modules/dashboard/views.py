from __future__ import annotations

from flask import Blueprint, render_template, request

from app.gestao import vencimento
from app.gestao.db import db_session
from app.gestao.modules.dashboard import service

bp = Blueprint("dashboard", __name__)

MESES = (
    "Janeiro",
    "Fevereiro",
    "Março",
    "Abril",
    "Maio",
    "Junho",
    "Julho",
    "Agosto",
    "Setembro",
    "Outubro",
    "Novembro",
    "Dezembro",
)


@bp.get("/")
def index():
    s = db_session()
    hoje = vencimento.hoje()
    return render_template(
        "dashboard.html",
        page="dashboard",
        hoje=hoje,
        resumo=service.estatisticas(s, hoje),
    )


@bp.get("/calendario")
def calendario():
    s = db_session()
    hoje = vencimento.hoje()
    ano = request.args.get("ano", type=int) or hoje.year
    mes = request.args.get("mes", type=int) or hoje.month
    if not 1 <= mes <= 12:
        mes = hoje.month
    dados = service.calendario(s, ano, mes, hoje)
    anterior = (ano - 1, 12) if mes == 1 else (ano, mes - 1)
    seguinte = (ano + 1, 1) if mes == 12 else (ano, mes + 1)
    return render_template(
        "calendario.html",
        page="calendario",
        dados=dados,
        semanas=service.semanas(ano, mes),
        titulo=f"{MESES[mes - 1]} {ano}",
        anterior=anterior,
        seguinte=seguinte,
        hoje=hoje,
    )
