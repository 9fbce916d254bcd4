"""One-off repair jobs: re-account closed records and lapse old TOIL.

Usage: ``APP_ENV=production python scripts/maintenance.py [--sweep]``
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_attendance.hr_attendance.common.datetime_utils import now_local
from src.hr_attendance.hr_attendance.common.logging_config import configure_logging
from src.hr_attendance.hr_attendance.container import build_container


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--sweep", action="store_true", help="also run one midnight auto-checkout sweep")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(settings)
    try:
        now = now_local()
        if args.sweep:
            closed = container.sweeper.sweep(now)
            print(f"auto-checkout: {len(closed)} record(s) closed")
        fixed = container.attendance_service.recalculate_hours()
        expired = container.toil_service.expire_old(now)
        print(f"recalculated: {fixed} record(s); expired TOIL entries: {expired}")
    finally:
        container.shutdown()


if __name__ == "__main__":
    main()
