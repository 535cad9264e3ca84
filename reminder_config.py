# reminder_config.py
import os
from typing import Mapping, Optional

import pytz
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

TASKS_TABLE = "tasks"

# Reminders are evaluated in US Central time
CENTRAL_TZ = pytz.timezone("America/Chicago")

# Daily reset window: 02:00 - 02:04 CT
RESET_HOUR = 2
RESET_WINDOW_MINUTES = 5

# Local scheduler cadence (in seconds)
DEFAULT_CHECK_INTERVAL = 60


class ReminderSettings(BaseModel):
    """Everything one invocation needs, resolved once from the environment."""

    model_config = ConfigDict(frozen=True)

    supabase_url: str
    supabase_key: str
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_whatsapp_number: str
    recipient_whatsapp_number: str


def _get(environ: Mapping[str, str], name: str) -> Optional[str]:
    # Empty strings count as unset
    value = environ.get(name)
    return value or None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ReminderSettings:
    """
    Builds ReminderSettings from an environment mapping.

    Args:
        environ (Mapping, optional): Source of settings. Defaults to os.environ.

    Returns:
        ReminderSettings: The resolved settings.

    Raises:
        ConfigurationError: If any required Supabase or Twilio value is missing.
    """
    if environ is None:
        environ = os.environ

    supabase_url = _get(environ, "SUPABASE_URL")
    # Service key preferred, anon key as fallback
    supabase_key = _get(environ, "SUPABASE_SERVICE_KEY") or _get(environ, "SUPABASE_ANON_KEY")

    if not supabase_url or not supabase_key:
        raise ConfigurationError("Missing Supabase configuration")

    account_sid = _get(environ, "TWILIO_ACCOUNT_SID")
    auth_token = _get(environ, "TWILIO_AUTH_TOKEN")
    whatsapp_number = _get(environ, "TWILIO_WHATSAPP_NUMBER")
    recipient = _get(environ, "YOUR_WHATSAPP_NUMBER")

    if not account_sid or not auth_token or not whatsapp_number or not recipient:
        raise ConfigurationError("Missing Twilio configuration")

    return ReminderSettings(
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        twilio_account_sid=account_sid,
        twilio_auth_token=auth_token,
        twilio_whatsapp_number=whatsapp_number,
        recipient_whatsapp_number=recipient,
    )


def load_cron_secret(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Returns CRON_SECRET, or None when no shared secret is configured."""
    if environ is None:
        environ = os.environ
    return _get(environ, "CRON_SECRET")


def local_scheduler_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    if environ is None:
        environ = os.environ
    return (environ.get("LOCAL_SCHEDULER_ENABLED") or "").strip().lower() in ("1", "true", "yes")


def check_interval_seconds(environ: Optional[Mapping[str, str]] = None) -> int:
    if environ is None:
        environ = os.environ
    raw = environ.get("REMINDER_CHECK_INTERVAL_SECONDS")
    if not raw:
        return DEFAULT_CHECK_INTERVAL
    try:
        return max(1, int(raw))
    except ValueError:
        raise ConfigurationError(f"Invalid REMINDER_CHECK_INTERVAL_SECONDS: {raw!r}")
