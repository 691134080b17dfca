"""Create empresas, responsaveis, documentos and andamentos tables.

Revision ID: a0c1e2d3f4b5
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a0c1e2d3f4b5"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "empresas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("razao_social", sa.String(255), nullable=False),
        sa.Column("cnpj", sa.String(14), nullable=False),
        sa.Column("telefone", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("nome_fantasia", sa.String(255), nullable=True),
        sa.Column("endereco", sa.Text(), nullable=True),
        sa.Column("login_municipal", sa.String(255), nullable=True),
        sa.Column("senha_municipal", sa.String(255), nullable=True),
        sa.Column("login_estadual", sa.String(255), nullable=True),
        sa.Column("senha_estadual", sa.String(255), nullable=True),
        sa.Column("simples_nacional", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("cnpj"),
    )
    op.create_index("idx_empresas_razao_social", "empresas", ["razao_social"])

    op.create_table(
        "responsaveis",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("telefone", sa.String(50), nullable=False),
        sa.Column("funcao", sa.String(100), nullable=False),
        sa.Column("empresa_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["empresa_id"], ["empresas.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_responsaveis_nome", "responsaveis", ["nome"])
    op.create_index("idx_responsaveis_empresa", "responsaveis", ["empresa_id"])

    op.create_table(
        "documentos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("tipo", sa.String(128), nullable=False),
        sa.Column("empresa_id", sa.Integer(), nullable=False),
        sa.Column("responsavel_id", sa.Integer(), nullable=False),
        sa.Column("data_emissao", sa.Date(), nullable=False),
        sa.Column("data_vencimento", sa.Date(), nullable=False),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.Column("arquivo_path", sa.String(512), nullable=True),
        sa.Column("status_geral", sa.String(32), nullable=False, server_default="pendente"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["empresa_id"], ["empresas.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["responsavel_id"], ["responsaveis.id"], ondelete="RESTRICT"),
    )
    op.create_index("idx_documentos_vencimento", "documentos", ["data_vencimento"])
    op.create_index("idx_documentos_empresa", "documentos", ["empresa_id"])

    op.create_table(
        "andamentos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("documento_id", sa.Integer(), nullable=False),
        sa.Column("responsavel_id", sa.Integer(), nullable=False),
        sa.Column("descricao", sa.Text(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="em_andamento"),
        sa.Column("data_criacao", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["documento_id"], ["documentos.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["responsavel_id"], ["responsaveis.id"], ondelete="RESTRICT"),
    )
    op.create_index("idx_andamentos_documento", "andamentos", ["documento_id"])


def downgrade() -> None:
    op.drop_index("idx_andamentos_documento", table_name="andamentos")
    op.drop_table("andamentos")
    op.drop_index("idx_documentos_empresa", table_name="documentos")
    op.drop_index("idx_documentos_vencimento", table_name="documentos")
    op.drop_table("documentos")
    op.drop_index("idx_responsaveis_empresa", table_name="responsaveis")
    op.drop_index("idx_responsaveis_nome", table_name="responsaveis")
    op.drop_table("responsaveis")
    op.drop_index("idx_empresas_razao_social", table_name="empresas")
    op.drop_table("empresas")
