from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "hr_system"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from hr_system.database.bootstrap import DEMO_ACCOUNTS, ensure_demo_employees

logger = logging.getLogger("hr_system.scripts.seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_employees(db_config)
    for emp_code, _, email, password, role, _ in DEMO_ACCOUNTS:
        logger.info("%-8s %-9s %s / %s", emp_code, role, email, password)


if __name__ == "__main__":
    main()
