"""Run one background job immediately, e.g. from system cron.

    python scripts/run_job.py end-of-day
    python scripts/run_job.py compliance
    python scripts/run_job.py expire-permissions
    python scripts/run_job.py daily-report
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "office_attendance"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from office_attendance.container import build_container

logger = logging.getLogger("run_job")

JOBS = {
    "end-of-day": lambda c: c.end_of_day_sweeper.run(c.clock.now()),
    "compliance": lambda c: c.compliance.run(c.clock.now()),
    "expire-permissions": lambda c: c.permission_gate.expire_due(c.clock.now()),
    "daily-report": lambda c: c.daily_report.run(c.clock.now()),
}


def main(argv: list[str]) -> int:
    if len(argv) != 1 or argv[0] not in JOBS:
        print(f"usage: run_job.py {{{'|'.join(JOBS)}}}", file=sys.stderr)
        return 2

    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)

    result = JOBS[argv[0]](container)
    logger.info("%s finished: %s", argv[0], result)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
