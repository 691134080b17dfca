"""
Create tables directly from the models (local SQLite / first run) and
optionally insert demo rows.

Usage:
  python scripts/init_db.py            # create tables
  python scripts/init_db.py --seed     # create tables + demo data (idempotent)
"""
import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import select  # noqa: E402

from app.gestao.models import Base, Documento, Empresa, Responsavel  # noqa: E402
from scripts._db_utils import create_script_engine, resolve_database_url, script_session  # noqa: E402

DEMO_CNPJ = "11222333000181"


def create_tables(*, database_url: str | None = None) -> None:
    db_url = resolve_database_url(database_url)
    engine = create_script_engine(db_url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()
    print("Tables created (existing tables left untouched).")


def seed_demo(*, database_url: str | None = None) -> None:
    """Insert one company, one responsible person and two documents unless the demo company exists."""
    db_url = resolve_database_url(database_url)
    with script_session(db_url) as s:
        if s.scalar(select(Empresa).where(Empresa.cnpj == DEMO_CNPJ)):
            print("Demo data already present; skipping.")
            return
        empresa = Empresa(
            razao_social="Empresa Demonstração LTDA",
            nome_fantasia="Demo",
            cnpj=DEMO_CNPJ,
            telefone="(71) 3333-0000",
            email="contato@demo.com.br",
            simples_nacional=True,
        )
        responsavel = Responsavel(
            nome="Maria Souza",
            email="maria@demo.com.br",
            telefone="(71) 99999-0000",
            funcao="Fiscal",
            empresa=empresa,
        )
        hoje = date.today()
        s.add_all(
            [
                empresa,
                responsavel,
                Documento(
                    nome="Alvará de funcionamento 2026",
                    tipo="ALVARÁ DE FUNCIONAMENTO",
                    empresa=empresa,
                    responsavel=responsavel,
                    data_emissao=hoje - timedelta(days=300),
                    data_vencimento=hoje + timedelta(days=15),
                ),
                Documento(
                    nome="Certidão federal",
                    tipo="CERTIDÃO FEDERAL",
                    empresa=empresa,
                    responsavel=responsavel,
                    data_emissao=hoje - timedelta(days=200),
                    data_vencimento=hoje - timedelta(days=10),
                ),
            ]
        )
    print("Demo data inserted.")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--seed", action="store_true", help="insert demo rows")
    parser.add_argument("--database-url", default=None)
    args = parser.parse_args()
    create_tables(database_url=args.database_url)
    if args.seed:
        seed_demo(database_url=args.database_url)


if __name__ == "__main__":
    main()
