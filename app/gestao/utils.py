from __future__ import annotations

from datetime import date, datetime

from app.gestao.errors import ValidationError


def clean(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def clean_or_none(value) -> str | None:
    return clean(value) or None


def parse_date(value, field: str) -> date:
    """Parse a YYYY-MM-DD value (a trailing time part is ignored)."""
    s = clean(value).split("T")[0]
    try:
        return date.fromisoformat(s)
    except ValueError:
        raise ValidationError(f"Data inválida para o campo {field}", extra={"field": field}) from None


def parse_id(value, field: str) -> int:
    try:
        return int(clean(value))
    except ValueError:
        raise ValidationError(f"Identificador inválido para o campo {field}", extra={"field": field}) from None


def parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return clean(value).lower() in ("1", "true", "on", "sim", "yes")


def missing_map(payload: dict, fields: tuple[str, ...]) -> dict[str, bool]:
    """{field: True if blank} for every required field; empty dict when all present."""
    missing = {f: not clean(payload.get(f)) for f in fields}
    return missing if any(missing.values()) else {}


def iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def formatar_data(value: date | datetime | None, fmt: str = "%d/%m/%Y") -> str:
    if value is None:
        return "—"
    return value.strftime(fmt)


DATA_TOO_LONG_MESSAGE = "Dados muito longos para algum campo"


def check_lengths(model, values: dict, fields: tuple[str, ...]) -> None:
    """Reject values longer than the column's declared String length."""
    columns = model.__table__.c
    for field in fields:
        length = getattr(columns[field].type, "length", None)
        if length and len(clean(values.get(field))) > length:
            raise ValidationError(DATA_TOO_LONG_MESSAGE, extra={"field": field})
