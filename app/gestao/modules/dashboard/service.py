"""
Dashboard aggregates, alert lists and the due-date calendar.

All buckets use the bounds from vencimento.janela() so counts agree with
the status_vencimento field on each serialized document. Nothing is cached.
"""
from __future__ import annotations

import calendar
from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select

from app.gestao import vencimento
from app.gestao.errors import ValidationError
from app.gestao.modules.documentos.service import filtro_status_clause, list_documentos, serialize_documento

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

PROXIMOS_DASHBOARD_LIMIT = 10
ESTATISTICAS_LIMIT = 20


def _count(s: "Session", model, *where) -> int:
    q = select(func.count()).select_from(model)
    for clause in where:
        q = q.where(clause)
    return int(s.scalar(q) or 0)


def _docs(s: "Session", status: str, referencia: date, limit: int | None = None) -> list[dict[str, Any]]:
    docs = list_documentos(s, status=status, referencia=referencia, limit=limit)
    return [serialize_documento(d, agora=referencia) for d in docs]


def contagens(s: "Session", referencia: date) -> dict[str, int]:
    from app.gestao.modules.documentos.models import Documento
    from app.gestao.modules.empresas.models import Empresa

    return {
        "empresas": _count(s, Empresa),
        "documentos": _count(s, Documento),
        "vencidos": _count(s, Documento, filtro_status_clause("vencidos", referencia)),
        "proximos": _count(s, Documento, filtro_status_clause("proximos", referencia)),
        "validos": _count(s, Documento, filtro_status_clause("validos", referencia)),
    }


def dashboard(s: "Session", hoje: date | None = None) -> dict[str, Any]:
    hoje = hoje or vencimento.hoje()
    c = contagens(s, hoje)
    return {
        "empresas": c["empresas"],
        "documentos": c["documentos"],
        "vencidos": c["vencidos"],
        "proximos": c["proximos"],
        "proximosVencimentos": _docs(s, "proximos", hoje, PROXIMOS_DASHBOARD_LIMIT),
    }


def estatisticas(s: "Session", hoje: date | None = None) -> dict[str, Any]:
    hoje = hoje or vencimento.hoje()
    proximos = _docs(s, "proximos", hoje)
    return {
        "estatisticas": contagens(s, hoje),
        "documentosVencidos": _docs(s, "vencidos", hoje, ESTATISTICAS_LIMIT),
        "documentosProximos": proximos[:ESTATISTICAS_LIMIT],
        "proximosVencimentos": proximos,
    }


def alertas(s: "Session", hoje: date | None = None) -> dict[str, Any]:
    hoje = hoje or vencimento.hoje()
    vencidos = _docs(s, "vencidos", hoje)
    proximos = _docs(s, "proximos", hoje)
    return {
        "totalVencidos": len(vencidos),
        "totalProximos": len(proximos),
        "totalAlertas": len(vencidos) + len(proximos),
        "vencidos": vencidos,
        "proximos": proximos,
    }


def calendario(s: "Session", ano: int, mes: int, hoje: date | None = None) -> dict[str, Any]:
    """Documents due in the given month, grouped by day of month."""
    from app.gestao.modules.documentos.models import Documento

    if not 1 <= mes <= 12:
        raise ValidationError("Mês inválido", extra={"field": "mes"})
    if not 1 <= ano <= 9999:
        raise ValidationError("Ano inválido", extra={"field": "ano"})
    hoje = hoje or vencimento.hoje()
    inicio = date(ano, mes, 1)
    fim = date(ano, mes, calendar.monthrange(ano, mes)[1])

    q = (
        select(Documento)
        .where(Documento.data_vencimento.between(inicio, fim))
        .order_by(Documento.data_vencimento.asc(), Documento.id.asc())
    )
    dias: dict[str, list[dict[str, Any]]] = {}
    total = 0
    for d in s.scalars(q):
        dias.setdefault(str(d.data_vencimento.day), []).append(serialize_documento(d, agora=hoje))
        total += 1
    return {"ano": ano, "mes": mes, "total": total, "dias": dias}


def semanas(ano: int, mes: int) -> list[list[int]]:
    """Month grid (weeks starting Sunday, 0 for padding days) for the calendar page."""
    return calendar.Calendar(firstweekday=calendar.SUNDAY).monthdayscalendar(ano, mes)
