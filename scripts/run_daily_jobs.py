#!/usr/bin/env python3
"""
Run the daily batch jobs outside the API (cron / platform scheduler).

Rotation runs before scoring so the scores land on the current week.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings  # noqa: E402
from core.utils import parse_local_date  # noqa: E402
from domain.models import SessionLocal  # noqa: E402
from services.job_service import JobService  # noqa: E402

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
logger = logging.getLogger("haven.scripts.daily_jobs")

JOBS = {
    "rotate": (JobService.rotate_all,),
    "metrics": (JobService.score_all,),
    "all": (JobService.rotate_all, JobService.score_all),
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run Haven's daily batch jobs")
    parser.add_argument(
        "--date",
        type=parse_local_date,
        default=None,
        help="Run date YYYY-MM-DD (defaults to each user's local today)",
    )
    parser.add_argument(
        "--job",
        choices=sorted(JOBS),
        default="all",
        help="Which job to run (default: all)",
    )
    return parser.parse_args(argv)


def run(job: str, run_date: date = None) -> int:
    """Run the selected jobs; returns the number of failed users"""
    failed = 0
    db = SessionLocal()
    try:
        for step in JOBS[job]:
            result = step(db, run_date)
            logger.info(
                f"{result.job}: processed={result.processed} "
                f"succeeded={result.succeeded} failed={result.failed}"
            )
            failed += result.failed
    finally:
        db.close()
    return failed


def main(argv=None) -> int:
    args = parse_args(argv)
    failed = run(args.job, args.date)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
