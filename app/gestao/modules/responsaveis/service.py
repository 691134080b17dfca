from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select

from app.gestao.errors import NotFound, ReferentialError, missing_fields_error
from app.gestao.utils import check_lengths, clean, iso, missing_map, parse_id

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.gestao.modules.empresas.models import Empresa
    from app.gestao.modules.responsaveis.models import Responsavel

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("nome", "email", "telefone", "funcao")
FUNCOES = ("Fiscal", "Contábil", "Departamento Pessoal", "Administrativo", "Jurídico")


def _resolve_empresa(s: "Session", raw) -> "Empresa | None":
    from app.gestao.modules.empresas.models import Empresa

    if not clean(raw):
        return None
    empresa = s.get(Empresa, parse_id(raw, "empresa_id"))
    if empresa is None:
        raise ReferentialError("Empresa não encontrada", extra={"field": "empresa_id"})
    return empresa


def _apply(s: "Session", responsavel: "Responsavel", payload: dict) -> None:
    missing = missing_map(payload, REQUIRED_FIELDS)
    if missing:
        raise missing_fields_error(missing)
    from app.gestao.modules.responsaveis.models import Responsavel

    check_lengths(Responsavel, payload, REQUIRED_FIELDS)
    empresa = _resolve_empresa(s, payload.get("empresa_id"))
    responsavel.nome = clean(payload.get("nome"))
    responsavel.email = clean(payload.get("email"))
    responsavel.telefone = clean(payload.get("telefone"))
    responsavel.funcao = clean(payload.get("funcao"))
    responsavel.empresa = empresa


def get_responsavel_or_404(s: "Session", responsavel_id: int) -> "Responsavel":
    from app.gestao.modules.responsaveis.models import Responsavel

    r = s.get(Responsavel, responsavel_id)
    if not r:
        raise NotFound("Responsável não encontrado")
    return r


def list_responsaveis(s: "Session") -> list["Responsavel"]:
    from app.gestao.modules.responsaveis.models import Responsavel

    return list(s.scalars(select(Responsavel).order_by(Responsavel.nome.asc(), Responsavel.id.asc())))


def create_responsavel(s: "Session", payload: dict) -> "Responsavel":
    from app.gestao.modules.responsaveis.models import Responsavel

    responsavel = Responsavel()
    _apply(s, responsavel, payload)
    s.add(responsavel)
    s.flush()
    logger.info("Responsável criado id=%s", responsavel.id)
    return responsavel


def update_responsavel(s: "Session", responsavel: "Responsavel", payload: dict) -> "Responsavel":
    _apply(s, responsavel, payload)
    s.flush()
    logger.info("Responsável atualizado id=%s", responsavel.id)
    return responsavel


def delete_responsavel(s: "Session", responsavel: "Responsavel") -> None:
    from app.gestao.modules.documentos.models import Andamento, Documento

    docs = s.scalar(select(func.count()).select_from(Documento).where(Documento.responsavel_id == responsavel.id))
    andamentos = s.scalar(select(func.count()).select_from(Andamento).where(Andamento.responsavel_id == responsavel.id))
    if docs or andamentos:
        raise ReferentialError(
            "Responsável possui documentos ou andamentos vinculados",
            extra={"documentos": docs, "andamentos": andamentos},
        )
    s.delete(responsavel)
    s.flush()
    logger.info("Responsável excluído id=%s", responsavel.id)


def serialize_responsavel(r: "Responsavel") -> dict[str, Any]:
    return {
        "id": r.id,
        "nome": r.nome,
        "email": r.email,
        "telefone": r.telefone,
        "funcao": r.funcao,
        "empresa_id": r.empresa_id,
        "empresa_nome": r.empresa.razao_social if r.empresa else None,
        "created_at": iso(r.created_at),
    }
