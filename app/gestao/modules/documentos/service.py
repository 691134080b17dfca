from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import or_, select
from sqlalchemy.exc import DataError

from app.gestao import uploads, vencimento
from app.gestao.errors import NotFound, ReferentialError, ValidationError, missing_fields_error
from app.gestao.utils import (
    DATA_TOO_LONG_MESSAGE,
    check_lengths,
    clean,
    clean_or_none,
    formatar_data,
    iso,
    missing_map,
    parse_date,
    parse_id,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from sqlalchemy.sql import Select
    from app.gestao.modules.documentos.models import Andamento, Documento
    from app.gestao.modules.empresas.models import Empresa
    from app.gestao.modules.responsaveis.models import Responsavel
    from app.gestao.storage import LocalStorage
    from app.gestao.uploads import PendingUpload

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("nome", "tipo", "empresa_id", "responsavel_id", "data_emissao", "data_vencimento")
ANDAMENTO_REQUIRED_FIELDS = ("responsavel_id", "descricao")

STATUS_GERAL = ("pendente", "em_andamento", "concluido", "cancelado")
STATUS_GERAL_LABELS = {
    "pendente": "Pendente",
    "em_andamento": "Em Andamento",
    "concluido": "Concluído",
    "cancelado": "Cancelado",
}

# Offered by the forms; the API accepts any non-blank tipo.
TIPOS_DOCUMENTO: dict[str, tuple[str, ...]] = {
    "Alvarás e licenças": (
        "ALVARÁ DE FUNCIONAMENTO",
        "ALVARÁ SANITÁRIO",
        "ALVARÁ DE PUBLICIDADE",
        "ALVARÁ AMBIENTAL",
        "AVCB",
        "TVL",
    ),
    "Procurações": (
        "PROCURAÇÃO ELETRÔNICA FEDERAL",
        "PROCURAÇÃO ELETRÔNICA ESTADUAL",
    ),
    "Certidões": (
        "CERTIDÃO FEDERAL",
        "CERTIDÃO ESTADUAL",
        "CERTIDÃO MUNICIPAL",
        "CERTIDÃO TRABALHISTA",
        "CERTIDÃO FGTS",
        "CERTIDÃO CONCORDATA E FALÊNCIA",
    ),
    "Taxas de fiscalização": (
        "TFF - SALVADOR",
        "TFF - LAURO DE FREITAS",
        "TFF - CAMAÇARI",
        "TFF - DIAS D'AVILA",
        "TFF - SIMÕES FILHO",
        "TFF - CANDEIAS",
        "TFF - FEIRA DE SANTANA",
        "TFF - ITABUNA",
        "TFF - ILHÉUS",
        "TFF - RECIFE",
        "TFF - FORTALEZA",
        "TFF - NATAL",
        "TFF - CUIABÁ",
        "TFF - VÁRZEA GRANDE",
    ),
    "Declarações": (
        "DECLARAÇÃO SIMEI (MEI)",
        "DECLARAÇÃO DE FATURAMENTO CAMAÇARI",
        "DECLARAÇÃO DE FATURAMENTO DIAS D'AVILA",
    ),
    "Outros": ("OUTROS",),
}

FILTROS_STATUS = ("vencidos", "proximos", "validos")


# ---------- Validation ----------
def validate_documento_payload(payload: dict) -> dict[str, Any]:
    """Check required fields and parse ids/dates. Returns the cleaned values."""
    missing = missing_map(payload, REQUIRED_FIELDS)
    if missing:
        raise missing_fields_error(missing)
    from app.gestao.modules.documentos.models import Documento

    check_lengths(Documento, payload, ("nome", "tipo"))
    return {
        "nome": clean(payload.get("nome")),
        "tipo": clean(payload.get("tipo")),
        "empresa_id": parse_id(payload.get("empresa_id"), "empresa_id"),
        "responsavel_id": parse_id(payload.get("responsavel_id"), "responsavel_id"),
        "data_emissao": parse_date(payload.get("data_emissao"), "data_emissao"),
        "data_vencimento": parse_date(payload.get("data_vencimento"), "data_vencimento"),
        "observacoes": clean_or_none(payload.get("observacoes")),
    }


def validate_status(status: str, field: str = "status_geral") -> str:
    status = clean(status)
    if status not in STATUS_GERAL:
        raise ValidationError(
            f"Status inválido. Use um de: {', '.join(STATUS_GERAL)}",
            extra={"field": field},
        )
    return status


def _referencias(s: "Session", empresa_id: int, responsavel_id: int) -> tuple["Empresa", "Responsavel"]:
    """
    Load the referenced rows with a shared lock, so they cannot be deleted
    before the document write commits (no-op on SQLite).
    """
    from app.gestao.modules.empresas.models import Empresa
    from app.gestao.modules.responsaveis.models import Responsavel

    empresa = s.get(Empresa, empresa_id, with_for_update={"read": True})
    if empresa is None:
        raise ReferentialError("Empresa não encontrada", extra={"field": "empresa_id"})
    responsavel = s.get(Responsavel, responsavel_id, with_for_update={"read": True})
    if responsavel is None:
        raise ReferentialError("Responsável não encontrado", extra={"field": "responsavel_id"})
    return empresa, responsavel


def _apply(documento: "Documento", values: dict[str, Any], empresa: "Empresa", responsavel: "Responsavel") -> None:
    documento.nome = values["nome"]
    documento.tipo = values["tipo"]
    documento.empresa = empresa
    documento.responsavel = responsavel
    documento.data_emissao = values["data_emissao"]
    documento.data_vencimento = values["data_vencimento"]
    documento.observacoes = values["observacoes"]


def _flush_or_discard(s: "Session", storage: "LocalStorage", stored_name: str | None) -> None:
    try:
        s.flush()
    except DataError as e:
        uploads.discard(storage, stored_name)
        s.rollback()
        raise ValidationError(DATA_TOO_LONG_MESSAGE) from e
    except Exception:
        uploads.discard(storage, stored_name)
        raise


def commit_or_discard(s: "Session", storage: "LocalStorage", stored_name: str | None) -> None:
    """Commit; if the commit fails, remove the file written for this request."""
    try:
        s.commit()
    except Exception:
        s.rollback()
        uploads.discard(storage, stored_name)
        raise


# ---------- Documentos ----------
def get_documento_or_404(s: "Session", documento_id: int) -> "Documento":
    from app.gestao.modules.documentos.models import Documento

    d = s.get(Documento, documento_id)
    if not d:
        raise NotFound("Documento não encontrado")
    return d


def create_documento(
    s: "Session",
    payload: dict,
    upload: "PendingUpload | None",
    storage: "LocalStorage",
) -> "Documento":
    """
    Validate, check references, write the file and insert, all before the caller commits.
    Nothing is written to disk unless validation and reference checks pass.
    """
    from app.gestao.modules.documentos.models import Documento

    values = validate_documento_payload(payload)
    empresa, responsavel = _referencias(s, values["empresa_id"], values["responsavel_id"])

    documento = Documento(status_geral="pendente")
    _apply(documento, values, empresa, responsavel)
    documento.arquivo_path = uploads.store(storage, upload) if upload else None
    s.add(documento)
    _flush_or_discard(s, storage, documento.arquivo_path)
    s.refresh(documento)

    logger.info(
        "Documento criado id=%s empresa_id=%s vencimento=%s arquivo=%s",
        documento.id,
        documento.empresa_id,
        documento.data_vencimento,
        documento.arquivo_path or "-",
    )
    return documento


def update_documento(
    s: "Session",
    documento: "Documento",
    payload: dict,
    upload: "PendingUpload | None",
    storage: "LocalStorage",
) -> str | None:
    """
    Full-field replace. Without a new file the stored reference is kept;
    with one, the reference is replaced (the previous file stays on disk).

    Returns the newly stored file name, if any.
    """
    values = validate_documento_payload(payload)
    empresa, responsavel = _referencias(s, values["empresa_id"], values["responsavel_id"])
    _apply(documento, values, empresa, responsavel)

    stored_name = None
    if upload:
        stored_name = uploads.store(storage, upload)
        documento.arquivo_path = stored_name
    _flush_or_discard(s, storage, stored_name)
    logger.info("Documento atualizado id=%s novo_arquivo=%s", documento.id, stored_name or "-")
    return stored_name


def update_status_geral(s: "Session", documento: "Documento", status: str) -> "Documento":
    documento.status_geral = validate_status(status)
    s.flush()
    logger.info("Documento id=%s status_geral=%s", documento.id, documento.status_geral)
    return documento


def delete_documento(s: "Session", documento: "Documento", storage: "LocalStorage") -> None:
    """Remove the stored file (if still on disk), then the row."""
    if documento.arquivo_path:
        uploads.discard(storage, documento.arquivo_path)
    s.delete(documento)
    s.flush()
    logger.info("Documento excluído id=%s", documento.id)


def resolve_download(documento: "Documento", storage: "LocalStorage") -> tuple[Path, str]:
    if not documento.arquivo_path:
        raise NotFound("Arquivo não encontrado")
    if not storage.exists(documento.arquivo_path):
        raise NotFound("Arquivo não encontrado no servidor")
    return storage.path(documento.arquivo_path), uploads.download_name(documento.arquivo_path, documento.nome)


# ---------- Queries ----------
def _documentos_query() -> "Select":
    from app.gestao.modules.documentos.models import Documento
    from app.gestao.modules.empresas.models import Empresa

    return select(Documento).join(Empresa, Documento.empresa_id == Empresa.id)


def filtro_status_clause(status: str, referencia: date):
    """SQL predicate for a dashboard bucket; bounds match vencimento.status_vencimento."""
    from app.gestao.modules.documentos.models import Documento

    inicio, fim = vencimento.janela(referencia)
    if status == "vencidos":
        return Documento.data_vencimento < inicio
    if status == "proximos":
        return Documento.data_vencimento.between(inicio, fim)
    if status == "validos":
        return Documento.data_vencimento > fim
    raise ValidationError(f"Filtro de status inválido. Use um de: {', '.join(FILTROS_STATUS)}", extra={"field": "status"})


def list_documentos(
    s: "Session",
    *,
    status: str | None = None,
    search: str | None = None,
    empresa_id: int | None = None,
    referencia: date | None = None,
    limit: int | None = None,
) -> list["Documento"]:
    """Documents ordered by ascending due date, optionally filtered."""
    from app.gestao.modules.documentos.models import Documento
    from app.gestao.modules.empresas.models import Empresa

    q = _documentos_query()
    if status:
        q = q.where(filtro_status_clause(status, referencia or vencimento.hoje()))
    if empresa_id:
        q = q.where(Documento.empresa_id == empresa_id)
    search = clean(search)
    if search:
        like = f"%{search}%"
        q = q.where(or_(Documento.nome.ilike(like), Empresa.razao_social.ilike(like), Documento.tipo.ilike(like)))
    q = q.order_by(Documento.data_vencimento.asc(), Documento.id.asc())
    if limit is not None:
        q = q.limit(limit)
    return list(s.scalars(q))


# ---------- Andamentos ----------
def list_andamentos(s: "Session", documento: "Documento") -> list["Andamento"]:
    from app.gestao.modules.documentos.models import Andamento

    q = (
        select(Andamento)
        .where(Andamento.documento_id == documento.id)
        .order_by(Andamento.data_criacao.desc(), Andamento.id.desc())
    )
    return list(s.scalars(q))


def create_andamento(s: "Session", documento: "Documento", payload: dict) -> "Andamento":
    from app.gestao.modules.documentos.models import Andamento
    from app.gestao.modules.responsaveis.models import Responsavel

    missing = missing_map(payload, ANDAMENTO_REQUIRED_FIELDS)
    if missing:
        raise missing_fields_error(missing)
    status = validate_status(payload.get("status") or "em_andamento", field="status")
    responsavel = s.get(Responsavel, parse_id(payload.get("responsavel_id"), "responsavel_id"))
    if responsavel is None:
        raise ReferentialError("Responsável não encontrado", extra={"field": "responsavel_id"})

    andamento = Andamento(
        documento=documento,
        responsavel=responsavel,
        descricao=clean(payload.get("descricao")),
        status=status,
        data_criacao=datetime.utcnow(),
    )
    s.add(andamento)
    s.flush()
    logger.info("Andamento criado id=%s documento_id=%s status=%s", andamento.id, documento.id, status)
    return andamento


# ---------- Serialization ----------
def serialize_documento(
    d: "Documento",
    *,
    detalhado: bool = False,
    agora: date | datetime | None = None,
) -> dict[str, Any]:
    agora = agora or vencimento.hoje()
    dias = vencimento.dias_restantes(d.data_vencimento, agora)
    empresa = d.empresa
    responsavel = d.responsavel
    out: dict[str, Any] = {
        "id": d.id,
        "nome": d.nome,
        "tipo": d.tipo,
        "empresa_id": d.empresa_id,
        "responsavel_id": d.responsavel_id,
        "data_emissao": iso(d.data_emissao),
        "data_vencimento": iso(d.data_vencimento),
        "observacoes": d.observacoes,
        "arquivo_path": d.arquivo_path,
        "arquivo_url": f"/uploads/documentos/{d.arquivo_path}" if d.arquivo_path else None,
        "status_geral": d.status_geral,
        "created_at": iso(d.created_at),
        "razao_social": empresa.razao_social if empresa else None,
        "nome_fantasia": empresa.nome_fantasia if empresa else None,
        "empresa_nome": empresa.razao_social if empresa else None,
        "empresa_cnpj": empresa.cnpj if empresa else None,
        "responsavel_nome": responsavel.nome if responsavel else None,
        "responsavel_funcao": responsavel.funcao if responsavel else None,
        "dias_restantes": dias,
        "status_vencimento": vencimento.status_from_dias(dias),
    }
    if detalhado:
        out.update(
            {
                "empresa_telefone": empresa.telefone if empresa else None,
                "empresa_email": empresa.email if empresa else None,
                "empresa_endereco": empresa.endereco if empresa else None,
                "responsavel_email": responsavel.email if responsavel else None,
                "responsavel_telefone": responsavel.telefone if responsavel else None,
            }
        )
    return out


def serialize_andamento(a: "Andamento") -> dict[str, Any]:
    return {
        "id": a.id,
        "documento_id": a.documento_id,
        "responsavel_id": a.responsavel_id,
        "responsavel_nome": a.responsavel.nome if a.responsavel else None,
        "responsavel_funcao": a.responsavel.funcao if a.responsavel else None,
        "descricao": a.descricao,
        "status": a.status,
        "data_criacao": iso(a.data_criacao),
        "data_formatada": formatar_data(a.data_criacao, "%d/%m/%Y %H:%M"),
    }
