"""Production worker for the scheduled release note check.

This worker runs as a separate service and owns the clock: it fires the
pipeline's scheduled entry point on a cron schedule (default 00:00 UTC,
09:00 JST). The pipeline itself knows nothing about schedules.

Usage:
    python scripts/worker.py [--now]

Environment Variables:
    RW_FEED_URL: Feed to watch
    RW_SLACK_WEBHOOK_URL: Incoming webhook for summaries and failures
    RW_DATABASE_URL / DATABASE_URL: SQLAlchemy database URL
    RW_CHECK_CRON: Crontab expression (default "0 0 * * *")
"""

import argparse
import asyncio
import os
import signal
import sys

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from release_watch.config.settings import settings
from release_watch.logging_config import configure_logging
from release_watch.pipeline.runner import ReleaseNotePipeline, build_pipeline

logger = structlog.get_logger()


class CheckWorker:
    """Schedules release note checks."""

    def __init__(self, pipeline: ReleaseNotePipeline):
        self.pipeline = pipeline
        self.scheduler = AsyncIOScheduler(timezone=settings.check_timezone)
        self.stopped = asyncio.Event()

    def setup_jobs(self):
        """Configure the scheduled check."""
        self.scheduler.add_job(
            self.pipeline.run_scheduled,
            CronTrigger.from_crontab(settings.check_cron, timezone=settings.check_timezone),
            id='release_note_check',
            name='Check release notes feed',
            replace_existing=True,
            misfire_grace_time=3600,
            max_instances=1,
        )
        logger.info("jobs_configured", cron=settings.check_cron, timezone=settings.check_timezone)

    def start(self):
        """Start the worker."""
        self.setup_jobs()
        self.scheduler.start()
        logger.info("worker_started", jobs=len(self.scheduler.get_jobs()))

    def stop(self):
        """Stop the worker gracefully."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.stopped.set()
        logger.info("worker_stopped")


async def main(run_now: bool = False):
    """Main entry point."""
    worker = CheckWorker(build_pipeline())

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, worker.stop)

    worker.start()

    if run_now:
        logger.info("running_initial_check")
        await worker.pipeline.run_scheduled()

    await worker.stopped.wait()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Scheduled release note checks")
    parser.add_argument("--now", action="store_true", help="Run one check immediately on startup")
    args = parser.parse_args()

    configure_logging(settings.log_level, settings.log_json)
    asyncio.run(main(run_now=args.now))
