from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.gestao.models import Base
from app.gestao.modules.empresas.models import Empresa
from app.gestao.modules.responsaveis.models import Responsavel


class Documento(Base):
    __tablename__ = "documentos"
    __table_args__ = (
        Index("idx_documentos_vencimento", "data_vencimento"),
        Index("idx_documentos_empresa", "empresa_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    tipo: Mapped[str] = mapped_column(String(128), nullable=False)

    empresa_id: Mapped[int] = mapped_column(ForeignKey("empresas.id", ondelete="RESTRICT"), nullable=False)
    responsavel_id: Mapped[int] = mapped_column(ForeignKey("responsaveis.id", ondelete="RESTRICT"), nullable=False)

    data_emissao: Mapped[date] = mapped_column(Date, nullable=False)
    data_vencimento: Mapped[date] = mapped_column(Date, nullable=False)

    observacoes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Stored file name under the uploads/documentos directory
    arquivo_path: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # pendente -> em_andamento -> concluido | cancelado
    status_geral: Mapped[str] = mapped_column(String(32), nullable=False, default="pendente")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    empresa: Mapped[Empresa] = relationship(
        "Empresa",
        back_populates="documentos",
        lazy="selectin",
    )
    responsavel: Mapped[Responsavel] = relationship(
        "Responsavel",
        lazy="selectin",
    )
    andamentos: Mapped[list["Andamento"]] = relationship(
        "Andamento",
        back_populates="documento",
        cascade="all, delete-orphan",
        lazy="select",
        order_by=lambda: [Andamento.data_criacao.desc(), Andamento.id.desc()],
    )


class Andamento(Base):
    """
    Progress entry on a document.
    Append-only: entries are never edited, only removed together with their document.
    """

    __tablename__ = "andamentos"
    __table_args__ = (
        Index("idx_andamentos_documento", "documento_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    documento_id: Mapped[int] = mapped_column(ForeignKey("documentos.id", ondelete="CASCADE"), nullable=False)
    responsavel_id: Mapped[int] = mapped_column(ForeignKey("responsaveis.id", ondelete="RESTRICT"), nullable=False)

    descricao: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="em_andamento")

    data_criacao: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    documento: Mapped[Documento] = relationship(
        "Documento",
        back_populates="andamentos",
        lazy="selectin",
    )
    responsavel: Mapped[Responsavel] = relationship(
        "Responsavel",
        lazy="selectin",
    )
