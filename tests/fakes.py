# tests/fakes.py

from datetime import datetime
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from errors import ResetError, SendError, StoreQueryError, UpdateError
from reminder_config import CENTRAL_TZ

TODAY = "2026-10-19"

FULL_ENV = {
    "SUPABASE_URL": "https://example.supabase.co",
    "SUPABASE_SERVICE_KEY": "service-key",
    "SUPABASE_ANON_KEY": "anon-key",
    "TWILIO_ACCOUNT_SID": "AC00000000000000000000000000000000",
    "TWILIO_AUTH_TOKEN": "auth-token",
    "TWILIO_WHATSAPP_NUMBER": "whatsapp:+14155238886",
    "YOUR_WHATSAPP_NUMBER": "whatsapp:+15551234567",
}


def central_now(hour: int, minute: int, second: int = 0, day: str = TODAY) -> datetime:
    """An aware instant at the given America/Chicago wall-clock time."""
    year, month, dom = (int(p) for p in day.split("-"))
    return CENTRAL_TZ.localize(datetime(year, month, dom, hour, minute, second))


def make_task(task_id, **overrides) -> Dict[str, Any]:
    task = {
        "id": task_id,
        "task": f"Task {task_id}",
        "due_date": TODAY,
        "completed": False,
        "priority": "medium",
        "category": None,
        "reminder_time": "09:00:00",
        "reminder_sent_today": False,
    }
    task.update(overrides)
    return task


class FakeTaskStore:
    """In-memory tasks table applying the same filters as the Supabase query."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        self.rows = [dict(r) for r in (rows or [])]
        self.queries = []
        self.marked = []
        self.resets = 0
        self.query_error: Optional[str] = None
        self.update_errors: Dict[Any, str] = {}
        self.reset_error: Optional[str] = None

    def fetch_due_reminders(self, today: str, current_time: str) -> List[Dict[str, Any]]:
        self.queries.append((today, current_time))
        if self.query_error:
            raise StoreQueryError(f"Supabase query error: {self.query_error}")
        return [
            dict(r) for r in self.rows
            if r.get("due_date") == today
            and r.get("completed") is False
            and r.get("reminder_sent_today") is False
            and r.get("reminder_time") is not None
            and r["reminder_time"] <= current_time
        ]

    def mark_reminder_sent(self, task_id: Any) -> None:
        if task_id in self.update_errors:
            raise UpdateError(self.update_errors[task_id])
        self.marked.append(task_id)
        for r in self.rows:
            if r["id"] == task_id:
                r["reminder_sent_today"] = True

    def reset_reminder_flags(self) -> None:
        if self.reset_error:
            raise ResetError(self.reset_error)
        self.resets += 1
        for r in self.rows:
            if r.get("reminder_sent_today") is True:
                r["reminder_sent_today"] = False

    def get(self, task_id: Any) -> Dict[str, Any]:
        return next(r for r in self.rows if r["id"] == task_id)


class FakeMessenger:
    def __init__(self, fail_for: Optional[Dict[str, str]] = None):
        self.sent = []
        # body substring -> error message
        self.fail_for = fail_for or {}

    def send(self, body: str, from_: str, to: str) -> str:
        for needle, error in self.fail_for.items():
            if needle in body:
                raise SendError(error)
        self.sent.append({"body": body, "from_": from_, "to": to})
        return f"SM{len(self.sent):032d}"


class RecordingQuery:
    """Stands in for a postgrest request builder and records the chain."""

    def __init__(self, data=None, error: Optional[Exception] = None):
        self.data = data
        self.error = error
        self.calls = []

    def select(self, *columns):
        self.calls.append(("select",) + columns)
        return self

    def update(self, values):
        self.calls.append(("update", values))
        return self

    def eq(self, column, value):
        self.calls.append(("eq", column, value))
        return self

    def lte(self, column, value):
        self.calls.append(("lte", column, value))
        return self

    def is_(self, column, value):
        self.calls.append(("is", column, value))
        return self

    @property
    def not_(self):
        self.calls.append(("not",))
        return self

    def execute(self):
        self.calls.append(("execute",))
        if self.error:
            raise self.error
        return SimpleNamespace(data=self.data)


class RecordingClient:
    def __init__(self, query: RecordingQuery):
        self.query = query
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query
