"""
Temporal status of a document, derived from its due date.

Status is never stored. Everything that shows or counts it (JSON fields,
dashboard buckets, HTML badges) goes through these functions so the
rounding rule stays the same everywhere.
"""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta

VALID = "valid"
EXPIRING = "expiring"
EXPIRED = "expired"

JANELA_DIAS = 30

LABELS = {VALID: "Válido", EXPIRING: "Vencendo", EXPIRED: "Vencido"}
CSS_CLASSES = {VALID: "success", EXPIRING: "warning", EXPIRED: "danger"}

_ONE_DAY = timedelta(days=1)


def hoje() -> date:
    """Local calendar date."""
    return date.today()


def dias_restantes(data_vencimento: date, agora: date | datetime | None = None) -> int:
    """
    ceil((due date at local midnight - now) / 1 day).

    With a plain date for ``agora`` this is the day difference; with a
    datetime, any time past midnight still counts the due day as remaining.
    """
    if isinstance(data_vencimento, datetime):
        data_vencimento = data_vencimento.date()
    if agora is None:
        agora = datetime.now()
    if isinstance(agora, datetime):
        vencimento = datetime.combine(data_vencimento, datetime.min.time(), tzinfo=agora.tzinfo)
        return math.ceil((vencimento - agora) / _ONE_DAY)
    return (data_vencimento - agora).days


def status_from_dias(dias: int) -> str:
    if dias < 0:
        return EXPIRED
    if dias <= JANELA_DIAS:
        return EXPIRING
    return VALID


def status_vencimento(data_vencimento: date, agora: date | datetime | None = None) -> str:
    return status_from_dias(dias_restantes(data_vencimento, agora))


def janela(referencia: date | None = None) -> tuple[date, date]:
    """Inclusive [today, today + 30 days] range of the 'expiring' bucket."""
    inicio = referencia or hoje()
    return inicio, inicio + timedelta(days=JANELA_DIAS)
