from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.gestao.modules.empresas.models import Empresa  # noqa: E402,F401
from app.gestao.modules.responsaveis.models import Responsavel  # noqa: E402,F401
from app.gestao.modules.documentos.models import Andamento, Documento  # noqa: E402,F401
