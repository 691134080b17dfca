from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.gestao.models import Base

if TYPE_CHECKING:
    from app.gestao.modules.documentos.models import Documento
    from app.gestao.modules.responsaveis.models import Responsavel


class Empresa(Base):
    __tablename__ = "empresas"
    __table_args__ = (
        Index("idx_empresas_razao_social", "razao_social"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Required
    razao_social: Mapped[str] = mapped_column(String(255), nullable=False)
    cnpj: Mapped[str] = mapped_column(String(14), nullable=False, unique=True)  # digits only
    telefone: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    nome_fantasia: Mapped[str | None] = mapped_column(String(255), nullable=True)
    endereco: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Government portal credentials
    login_municipal: Mapped[str | None] = mapped_column(String(255), nullable=True)
    senha_municipal: Mapped[str | None] = mapped_column(String(255), nullable=True)
    login_estadual: Mapped[str | None] = mapped_column(String(255), nullable=True)
    senha_estadual: Mapped[str | None] = mapped_column(String(255), nullable=True)

    simples_nacional: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    observacoes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    documentos: Mapped[list["Documento"]] = relationship(
        "Documento",
        back_populates="empresa",
        lazy="select",
    )
    responsaveis: Mapped[list["Responsavel"]] = relationship(
        "Responsavel",
        back_populates="empresa",
        lazy="select",
    )
