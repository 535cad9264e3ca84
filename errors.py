# errors.py

class ReminderError(Exception):
    """Base class for every failure raised while checking reminders."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedMethod(ReminderError):
    """The invocation used an HTTP method other than GET or POST."""


class ConfigurationError(ReminderError):
    """A required Supabase or Twilio setting is missing."""


class StoreQueryError(ReminderError):
    """The eligible-task query failed. Fatal to the invocation."""


class SendError(ReminderError):
    """Twilio refused or failed to send a single reminder."""


class UpdateError(ReminderError):
    """Setting reminder_sent_today on a single task failed."""


class ResetError(ReminderError):
    """The daily bulk reset of reminder_sent_today failed."""
