# reminder_handler.py
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from errors import UnsupportedMethod
from reminder_config import load_cron_secret, load_settings
from reminder_dispatcher import dispatch_reminders
from supabase_service import create_store_client
from twilio_service import create_messaging_client

logger = logging.getLogger(__name__)

# GET comes from the cron trigger, POST is a manual run
ALLOWED_METHODS = ("GET", "POST")
CRON_SECRET_HEADER = "x-vercel-cron-secret"
CRON_USER_AGENT = "vercel-cron"


def ensure_supported_method(method: str) -> None:
    if method.upper() not in ALLOWED_METHODS:
        raise UnsupportedMethod("Method not allowed")


def verify_cron_secret(headers: Mapping[str, str], expected_secret: Optional[str]) -> bool:
    """
    Checks the shared cron secret without ever rejecting the request.

    Returns False only when a secret is configured, the header does not
    match it, and the caller is not the platform cron (which sends no
    custom headers). The caller is expected to proceed either way.
    """
    if not expected_secret:
        return True
    if headers.get(CRON_SECRET_HEADER) == expected_secret:
        return True
    if CRON_USER_AGENT in (headers.get("user-agent") or ""):
        return True
    logger.warning("Unauthorized request - missing or invalid cron secret")
    return False


def _error_response(e: Exception) -> Tuple[int, Dict[str, Any]]:
    return 500, {
        "error": getattr(e, "message", None) or str(e),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def run_reminder_check(
    environ: Optional[Mapping[str, str]] = None,
    authorized: bool = True,
    store_factory: Callable = create_store_client,
    messenger_factory: Callable = create_messaging_client,
    now: Optional[datetime] = None,
) -> Tuple[int, Dict[str, Any]]:
    """
    Resolves settings, builds the Supabase and Twilio clients, and runs
    one dispatch.

    Returns:
        tuple: (status_code, body). 200 with the invocation result once
        dispatch has run, 500 with {error, timestamp} if settings, client
        construction or the initial query failed.
    """
    try:
        settings = load_settings(environ)
        store = store_factory(settings.supabase_url, settings.supabase_key)
        messenger = messenger_factory(settings.twilio_account_sid, settings.twilio_auth_token)
        result = dispatch_reminders(settings, store, messenger, authorized=authorized, now=now)
    except Exception as e:
        logger.error(f"Error in check-reminders: {e}", exc_info=True)
        return _error_response(e)

    return 200, result.to_response()


def check_reminders(
    method: str,
    headers: Mapping[str, str],
    environ: Optional[Mapping[str, str]] = None,
    store_factory: Callable = create_store_client,
    messenger_factory: Callable = create_messaging_client,
    now: Optional[datetime] = None,
) -> Tuple[int, Dict[str, Any]]:
    """
    Handles one HTTP invocation of the reminder check.

    Args:
        method (str): HTTP method. Only GET and POST are served.
        headers (Mapping): Request headers, lower-case keys.
        environ (Mapping, optional): Settings source. Defaults to os.environ.

    Returns:
        tuple: (status_code, body).
    """
    try:
        ensure_supported_method(method)
    except UnsupportedMethod as e:
        logger.info(f"Rejected {method} request to check-reminders")
        return 405, {"error": e.message}

    authorized = verify_cron_secret(headers, load_cron_secret(environ))
    return run_reminder_check(
        environ,
        authorized=authorized,
        store_factory=store_factory,
        messenger_factory=messenger_factory,
        now=now,
    )
