# reminder_dispatcher.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, Field

from errors import ResetError, SendError, UpdateError
from reminder_config import CENTRAL_TZ, RESET_HOUR, RESET_WINDOW_MINUTES, ReminderSettings

logger = logging.getLogger(__name__)

PRIORITY_MARKERS = {
    "high": "🔴",
    "medium": "🟡",
    "low": "🟢",
}
DEFAULT_PRIORITY_MARKER = "⚪"
DEFAULT_PRIORITY = "medium"


class CentralTime(NamedTuple):
    checked_at: str
    today: str
    current_time: str
    hour: int
    minute: int

    @property
    def label(self) -> str:
        return f"{self.today} {self.current_time}"


class InvocationResult(BaseModel):
    """Outcome of one reminder check, returned as the response body."""

    checked_at: str
    central_time: str
    tasks_found: int = 0
    messages_sent: int = 0
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    reset_performed: Optional[bool] = None

    def to_response(self) -> Dict[str, Any]:
        # reset_performed only appears when a reset actually happened
        return self.model_dump(exclude_none=True)


def compute_central_time(now: Optional[datetime] = None) -> CentralTime:
    """
    Resolves 'now' to America/Chicago.

    Args:
        now (datetime, optional): Timezone-aware instant. Defaults to the current UTC time.

    Returns:
        CentralTime: ISO date, 'HH:MM:00' time (seconds truncated), hour and minute.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    central = now.astimezone(CENTRAL_TZ)
    return CentralTime(
        checked_at=now.astimezone(timezone.utc).isoformat(),
        today=central.date().isoformat(),
        current_time=f"{central.hour:02d}:{central.minute:02d}:00",
        hour=central.hour,
        minute=central.minute,
    )


def should_reset(hour: int, minute: int) -> bool:
    """True inside the daily reset window (02:00 - 02:04 CT)."""
    return hour == RESET_HOUR and minute < RESET_WINDOW_MINUTES


def format_reminder_message(task: Dict[str, Any]) -> str:
    """
    Builds the WhatsApp body for a single task.

    Unknown or missing priorities get a neutral marker; the priority text
    defaults to 'medium'. The category line is left out when there is none.
    """
    priority = task.get("priority")
    marker = PRIORITY_MARKERS.get(priority, DEFAULT_PRIORITY_MARKER)

    message = "📋 *Task Reminder*\n\n"
    message += f"{marker} *{task.get('task')}*\n\n"
    message += f"Priority: {priority or DEFAULT_PRIORITY}\n"
    if task.get("category"):
        message += f"Category: {task['category']}\n"
    message += "Due: Today\n\n"
    message += "_Sent from your To-Do App_"
    return message


def dispatch_reminders(
    settings: ReminderSettings,
    store,
    messenger,
    authorized: bool = True,
    now: Optional[datetime] = None,
) -> InvocationResult:
    """
    Runs one reminder check: fetch due tasks, send and mark each, then
    reset the daily flags when inside the reset window.

    Args:
        settings (ReminderSettings): Sender and recipient addresses.
        store: Object with fetch_due_reminders, mark_reminder_sent and reset_reminder_flags.
        messenger: Object with send(body, from_, to) returning a message id.
        authorized (bool): Outcome of the shared-secret check. Unverified requests still run.
        now (datetime, optional): Instant to evaluate at. Defaults to the current time.

    Returns:
        InvocationResult: Counts and per-task errors.

    Raises:
        StoreQueryError: If the initial query fails. Nothing is sent in that case.
    """
    if not authorized:
        logger.warning("Proceeding with unverified reminder check request")

    central = compute_central_time(now)
    logger.info(f"Checking reminders for {central.today} at {central.current_time} CT")

    tasks = store.fetch_due_reminders(central.today, central.current_time)
    logger.info(f"Found {len(tasks)} tasks to remind")

    result = InvocationResult(
        checked_at=central.checked_at,
        central_time=central.label,
        tasks_found=len(tasks),
    )

    for task in tasks:
        task_id = task.get("id")
        task_name = task.get("task")
        try:
            sid = messenger.send(
                format_reminder_message(task),
                settings.twilio_whatsapp_number,
                settings.recipient_whatsapp_number,
            )
        except SendError as e:
            logger.error(f"Failed to send reminder for task \"{task_name}\": {e.message}")
            result.errors.append({"task_id": task_id, "task_name": task_name, "error": e.message})
            continue

        logger.info(f"Sent reminder for task \"{task_name}\" - Message SID: {sid}")

        try:
            store.mark_reminder_sent(task_id)
        except UpdateError as e:
            # Already sent; the task stays eligible and will be re-sent next run
            result.errors.append({"task_id": task_id, "error": f"Update failed: {e.message}"})
            continue

        result.messages_sent += 1

    if should_reset(central.hour, central.minute):
        logger.info("Resetting reminder_sent_today flags...")
        try:
            store.reset_reminder_flags()
        except ResetError as e:
            result.errors.append({"error": f"Reset failed: {e.message}"})
        else:
            result.reset_performed = True
            logger.info("Reset complete")

    return result
