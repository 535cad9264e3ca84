import logging
from typing import Any, Dict, List

from supabase import create_client, Client

from errors import ResetError, StoreQueryError, UpdateError
from reminder_config import TASKS_TABLE

logger = logging.getLogger(__name__)


def _error_message(e: Exception) -> str:
    # postgrest APIError carries the server message on .message
    return getattr(e, "message", None) or str(e)


def create_store_client(supabase_url: str, supabase_key: str) -> "TaskStore":
    """Builds a TaskStore backed by a real Supabase client."""
    client: Client = create_client(supabase_url, supabase_key)
    return TaskStore(client)


class TaskStore:
    """
    Thin wrapper around the Supabase 'tasks' table.

    Only the reminder_sent_today column is ever written; rows are never
    inserted or deleted from here.
    """

    def __init__(self, client: Client, table: str = TASKS_TABLE):
        self.client = client
        self.table = table

    def fetch_due_reminders(self, today: str, current_time: str) -> List[Dict[str, Any]]:
        """
        Fetches every task whose reminder should fire now.

        Args:
            today (str): Current Central date, 'YYYY-MM-DD'.
            current_time (str): Current Central time, 'HH:MM:00'.

        Returns:
            list: Task rows in whatever order Supabase returns them.

        Raises:
            StoreQueryError: If the query fails for any reason.
        """
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("due_date", today)
                .eq("completed", False)
                .eq("reminder_sent_today", False)
                .not_.is_("reminder_time", "null")
                .lte("reminder_time", current_time)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching due reminders: {e}", exc_info=True)
            raise StoreQueryError(f"Supabase query error: {_error_message(e)}") from e

        return response.data or []

    def mark_reminder_sent(self, task_id: Any) -> None:
        """
        Sets reminder_sent_today = true for a single task.

        Raises:
            UpdateError: If Supabase rejects the update.
        """
        try:
            self.client.table(self.table).update({"reminder_sent_today": True}).eq("id", task_id).execute()
        except Exception as e:
            logger.error(f"Failed to update reminder_sent_today for task {task_id}: {e}")
            raise UpdateError(_error_message(e)) from e

    def reset_reminder_flags(self) -> None:
        """
        Clears reminder_sent_today on every flagged task, whatever its due date.

        Raises:
            ResetError: If the bulk update fails.
        """
        try:
            self.client.table(self.table).update({"reminder_sent_today": False}).eq("reminder_sent_today", True).execute()
        except Exception as e:
            logger.error(f"Failed to reset reminder flags: {e}")
            raise ResetError(_error_message(e)) from e
