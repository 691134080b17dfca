from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.gestao.models import Base

if TYPE_CHECKING:
    from app.gestao.modules.empresas.models import Empresa


class Responsavel(Base):
    __tablename__ = "responsaveis"
    __table_args__ = (
        Index("idx_responsaveis_nome", "nome"),
        Index("idx_responsaveis_empresa", "empresa_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    telefone: Mapped[str] = mapped_column(String(50), nullable=False)
    funcao: Mapped[str] = mapped_column(String(100), nullable=False)  # e.g. Fiscal, Contábil

    empresa_id: Mapped[int | None] = mapped_column(ForeignKey("empresas.id", ondelete="SET NULL"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    empresa: Mapped["Empresa | None"] = relationship(
        "Empresa",
        back_populates="responsaveis",
        lazy="selectin",
    )
