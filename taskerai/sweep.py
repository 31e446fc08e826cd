"""
CLI entrypoint for the pending-user sweep. Run it from cron, e.g. every five minutes:

  */5 * * * * cd /path/to/taskerai && .venv/bin/python -m taskerai.sweep

Pass ``--enqueue`` to hand the sweep to the RQ worker instead of running it here.
"""

import argparse
import sys
from typing import Optional, Sequence

from sqlmodel import Session

from taskerai.core.config import settings
from taskerai.core.logging import get_logger, setup_logging
from taskerai.db.session import engine
from taskerai.services.pending_user_service import PendingUserService, clamp_sweep_minutes

logger = get_logger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delete pending users older than the TTL.")
    parser.add_argument(
        "--duration",
        type=int,
        default=settings.PENDING_USER_TTL_MINUTES,
        help="Age in minutes after which pending users are deleted (default: %(default)s)",
    )
    parser.add_argument(
        "--enqueue",
        action="store_true",
        help="Enqueue the sweep on the RQ worker instead of running it in-process",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one sweep and report the outcome through the exit code."""
    setup_logging()
    args = parse_args(argv)
    duration = clamp_sweep_minutes(args.duration)

    if args.enqueue:
        from taskerai.workers.queue import enqueue_task
        from taskerai.workers.tasks import sweep_pending_users_task

        job_id = enqueue_task(sweep_pending_users_task, duration_minutes=duration)
        logger.info(f"Sweep enqueued as job {job_id}")
        return 0

    try:
        with Session(engine) as session:
            deleted = PendingUserService.sweep(session, duration)
    except Exception as e:
        logger.exception(f"Pending-user sweep failed: {e}")
        return 1
    logger.info(f"Sweep completed: deleted={deleted} duration_minutes={duration}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
