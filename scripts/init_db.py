"""Create the DayFlow database and tables for the settings picked by APP_ENV.

    python scripts/init_db.py            # schema only
    python scripts/init_db.py --seed     # schema plus the first HR account
"""
from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module
from dayflow.database.bootstrap import apply_schema, ensure_hr_account, list_tables

logger = logging.getLogger("init_db")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--schema", default=str(REPO_ROOT / "database" / "schema.sql"), help="schema file to apply")
    parser.add_argument("--seed", action="store_true", help="also create the first HR account")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=args.schema)
    logger.info("Tables: %s", ", ".join(list_tables(db_config)))

    if args.seed:
        created = ensure_hr_account(
            db_config,
            employee_id=settings.SEED_HR_EMPLOYEE_ID,
            email=settings.SEED_HR_EMAIL,
            password=settings.SEED_HR_PASSWORD,
        )
        logger.info("HR account %s %s", settings.SEED_HR_EMAIL, "created" if created else "already present")
    return 0


if __name__ == "__main__":
    sys.exit(main())
