"""Create the first HR account so someone can log in and add employees.

Defaults come from SEED_HR_* settings; flags override them.
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
from dayflow.database.bootstrap import ensure_hr_account

logger = logging.getLogger("seed_db")


def main(argv=None) -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--employee-id", default=settings.SEED_HR_EMPLOYEE_ID)
    parser.add_argument("--email", default=settings.SEED_HR_EMAIL)
    parser.add_argument("--password", default=settings.SEED_HR_PASSWORD)
    parser.add_argument("--name", default="HR Administrator")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    created = ensure_hr_account(
        dict(settings.DB_CONFIG),
        employee_id=args.employee_id,
        email=args.email,
        password=args.password,
        name=args.name,
    )
    if not created:
        logger.info("%s is already registered; nothing to do", args.email)
    return 0


if __name__ == "__main__":
    sys.exit(main())
