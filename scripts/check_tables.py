"""
List the application tables and their row counts.

Usage:
  python scripts/check_tables.py
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import func, inspect, select  # noqa: E402

from app.gestao.models import Base  # noqa: E402
from scripts._db_utils import create_script_engine, resolve_database_url  # noqa: E402


def check_tables(*, database_url: str | None = None) -> dict[str, int | None]:
    """{table: row count}; None for tables missing from the database."""
    engine = create_script_engine(resolve_database_url(database_url))
    counts: dict[str, int | None] = {}
    try:
        insp = inspect(engine)
        with engine.connect() as conn:
            for name, table in Base.metadata.tables.items():
                if not insp.has_table(name):
                    counts[name] = None
                    continue
                counts[name] = conn.execute(select(func.count()).select_from(table)).scalar_one()
    finally:
        engine.dispose()
    return counts


def main() -> None:
    counts = check_tables()
    for name, count in sorted(counts.items()):
        print(f"{name}: {'MISSING' if count is None else count}")
    if any(c is None for c in counts.values()):
        print("Some tables are missing; run `alembic upgrade head`.")
        sys.exit(1)


if __name__ == "__main__":
    main()
