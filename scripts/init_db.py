from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.cardhub.cardhub.database.bootstrap import apply_schema, list_tables

CARDHUB_TABLES = ("companies", "company_tokens", "plans", "company_subscriptions", "employees", "visits")


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    present = set(list_tables(db_config))
    missing = [name for name in CARDHUB_TABLES if name not in present]
    if missing:
        print(f"FAIL: CardHub schema incomplete on {target}, missing: {', '.join(missing)}")
        return 1

    print(f"OK: CardHub schema ready on {target}")
    for name in CARDHUB_TABLES:
        print(f"  - {name}")
    print("Next: python scripts/seed_db.py to load plans and the demo company.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
