"""
Release-phase helper.

- Fail fast on a production deploy pointed at SQLite.
- Run alembic migrations up to head.

Usage:
  python scripts/release.py
"""

from __future__ import annotations

import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def run_release() -> None:
    from dotenv import load_dotenv

    from app.gestao.config import load_settings

    load_dotenv()
    settings = load_settings()
    db_url = settings.database_url
    env = settings.env.lower()
    if env in ("prod", "production") and db_url.startswith("sqlite"):
        raise RuntimeError("Refusing to run release on sqlite in production. Set DATABASE_URL (or DB_HOST) to Postgres.")

    print("=== Gestão Documental release start ===", flush=True)
    print(f"ENV={env or '(unset)'}", flush=True)
    print("Running Alembic migrations...", flush=True)

    from alembic import command
    from alembic.config import Config

    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))
    command.upgrade(cfg, "head")
    print("Migrations complete.", flush=True)
    print("=== Gestão Documental release done ===", flush=True)


def main() -> None:
    run_release()


if __name__ == "__main__":
    main()
