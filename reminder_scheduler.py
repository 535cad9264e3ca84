import logging

from apscheduler.schedulers.background import BackgroundScheduler

from reminder_config import CENTRAL_TZ, check_interval_seconds
from reminder_handler import run_reminder_check

logger = logging.getLogger(__name__)

JOB_ID = "check_reminders_job"

scheduler = BackgroundScheduler(timezone=CENTRAL_TZ)


def run_scheduled_check() -> None:
    """Scheduler job: one reminder check, trusted like the platform cron."""
    status_code, body = run_reminder_check(authorized=True)
    if status_code == 200:
        logger.info(f"Scheduled reminder check: {body['messages_sent']}/{body['tasks_found']} sent, {len(body['errors'])} errors")
    else:
        logger.error(f"Scheduled reminder check failed: {body['error']}")


def start_scheduler(interval_seconds: int = None) -> None:
    if interval_seconds is None:
        interval_seconds = check_interval_seconds()
    scheduler.add_job(
        run_scheduled_check,
        'interval',
        seconds=interval_seconds,
        id=JOB_ID,
        replace_existing=True
    )
    scheduler.start()
    logger.info(f"Reminder scheduler started (every {interval_seconds}s)")


def stop_scheduler() -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Reminder scheduler stopped")
