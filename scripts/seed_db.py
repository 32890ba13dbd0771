from __future__ import annotations

import importlib

from dotenv import load_dotenv

from campus_attendance.config import get_settings_module
from campus_attendance.database.bootstrap import apply_schema, ensure_demo_accounts
from campus_attendance.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    ensure_demo_accounts(db_config)
    print(f"OK: Seeded demo accounts -> {DBConfig.from_dict(db_config).describe()}")


if __name__ == "__main__":
    main()
