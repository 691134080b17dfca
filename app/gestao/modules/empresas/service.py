from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.exc import DataError, IntegrityError

from app.gestao.errors import NotFound, ReferentialError, ValidationError, missing_fields_error
from app.gestao.modules.empresas.cnpj import limpar_cnpj, validar_cnpj
from app.gestao.utils import DATA_TOO_LONG_MESSAGE, check_lengths, clean, clean_or_none, iso, missing_map, parse_bool

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.gestao.modules.empresas.models import Empresa

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("razao_social", "cnpj", "telefone", "email")
OPTIONAL_TEXT_FIELDS = (
    "nome_fantasia",
    "endereco",
    "login_municipal",
    "senha_municipal",
    "login_estadual",
    "senha_estadual",
    "observacoes",
)


def validate_empresa_payload(payload: dict) -> None:
    missing = missing_map(payload, REQUIRED_FIELDS)
    if missing:
        raise missing_fields_error(missing)
    if not validar_cnpj(payload.get("cnpj")):
        raise ValidationError("CNPJ inválido", extra={"field": "cnpj"})
    from app.gestao.modules.empresas.models import Empresa

    check_lengths(Empresa, payload, ("razao_social", "telefone", "email") + OPTIONAL_TEXT_FIELDS)


def _apply(empresa: "Empresa", payload: dict) -> None:
    empresa.razao_social = clean(payload.get("razao_social"))
    empresa.cnpj = limpar_cnpj(payload.get("cnpj"))
    empresa.telefone = clean(payload.get("telefone"))
    empresa.email = clean(payload.get("email"))
    for field in OPTIONAL_TEXT_FIELDS:
        setattr(empresa, field, clean_or_none(payload.get(field)))
    empresa.simples_nacional = parse_bool(payload.get("simples_nacional"))


def _flush_unique(s: "Session") -> None:
    try:
        s.flush()
    except IntegrityError as e:
        s.rollback()
        raise ValidationError("CNPJ já cadastrado", extra={"field": "cnpj"}) from e
    except DataError as e:
        s.rollback()
        raise ValidationError(DATA_TOO_LONG_MESSAGE) from e


def get_empresa_or_404(s: "Session", empresa_id: int) -> "Empresa":
    from app.gestao.modules.empresas.models import Empresa

    e = s.get(Empresa, empresa_id)
    if not e:
        raise NotFound("Empresa não encontrada")
    return e


def list_empresas(s: "Session") -> list["Empresa"]:
    from app.gestao.modules.empresas.models import Empresa

    return list(s.scalars(select(Empresa).order_by(Empresa.created_at.desc(), Empresa.id.desc())))


def create_empresa(s: "Session", payload: dict) -> "Empresa":
    from app.gestao.modules.empresas.models import Empresa

    validate_empresa_payload(payload)
    empresa = Empresa()
    _apply(empresa, payload)
    s.add(empresa)
    _flush_unique(s)
    logger.info("Empresa criada id=%s cnpj=%s", empresa.id, empresa.cnpj)
    return empresa


def update_empresa(s: "Session", empresa: "Empresa", payload: dict) -> "Empresa":
    """Full-field replace."""
    validate_empresa_payload(payload)
    _apply(empresa, payload)
    _flush_unique(s)
    logger.info("Empresa atualizada id=%s", empresa.id)
    return empresa


def delete_empresa(s: "Session", empresa: "Empresa") -> None:
    """Delete a company with no documents; its responsáveis lose the back-reference."""
    from app.gestao.modules.documentos.models import Documento

    total = s.scalar(select(func.count()).select_from(Documento).where(Documento.empresa_id == empresa.id))
    if total:
        raise ReferentialError(
            "Empresa possui documentos vinculados",
            extra={"documentos": total},
        )
    for r in list(empresa.responsaveis):
        r.empresa = None
    s.delete(empresa)
    s.flush()
    logger.info("Empresa excluída id=%s", empresa.id)


def serialize_empresa(empresa: "Empresa") -> dict[str, Any]:
    return {
        "id": empresa.id,
        "razao_social": empresa.razao_social,
        "nome_fantasia": empresa.nome_fantasia,
        "cnpj": empresa.cnpj,
        "telefone": empresa.telefone,
        "email": empresa.email,
        "endereco": empresa.endereco,
        "login_municipal": empresa.login_municipal,
        "senha_municipal": empresa.senha_municipal,
        "login_estadual": empresa.login_estadual,
        "senha_estadual": empresa.senha_estadual,
        "simples_nacional": bool(empresa.simples_nacional),
        "observacoes": empresa.observacoes,
        "created_at": iso(empresa.created_at),
    }
