"""
Event logger utility for authentication events.
"""
from datetime import datetime, timezone
from typing import Optional
from fastapi import Request
import sys
import logging
import os

logger = logging.getLogger("account_service.auth_events")
# Events are INFO records; keep them even when the root logger is at WARNING
logger.setLevel(logging.INFO)

LOG_FILE_NAME = "auth_events.log"

ALLOWED_EVENT_TYPES = {
    "signup",
    "login_success",
    "login_failure",
    "profile_access",
    "seed",
}


def configure_event_file_logging(log_dir: Optional[str]) -> Optional[logging.Handler]:
    """
    Also write auth events to LOG_DIR/auth_events.log.

    Returns the attached handler, or None when no directory is configured or
    the directory cannot be created. Calling it again for the same file does
    not attach a second handler.
    """
    if not log_dir:
        return None

    path = os.path.abspath(os.path.join(log_dir, LOG_FILE_NAME))
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return handler

    # Continue without the file if directory creation fails
    try:
        os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(path)
    except OSError as e:
        print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)
        return None

    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s:%(message)s"))
    logger.addHandler(handler)
    return handler


def client_ip(request: Request) -> Optional[str]:
    ip_address = None
    if request.client:
        ip_address = request.client.host

    # Check for X-Forwarded-For header (proxy/load balancer scenarios)
    if not ip_address and request.headers.get("x-forwarded-for"):
        # X-Forwarded-For can contain multiple IPs, take the first one
        ip_address = request.headers.get("x-forwarded-for").split(",")[0].strip()

    return ip_address


def log_auth_event(
    event_type: str,
    request: Request,
    user_id: Optional[str] = None,
    email: Optional[str] = None,
) -> None:
    """
    Log an authentication event.

    Args:
        event_type: One of: signup, login_success, login_failure,
                    profile_access, seed
        request: FastAPI Request object
        user_id: Id of the user concerned, when known
        email: Email the request was made for, when known

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    logger.info(
        "AUTH %s user_id=%s email=%s ip=%s user_agent=%s timestamp=%s",
        event_type,
        user_id,
        email,
        client_ip(request),
        request.headers.get("user-agent"),
        datetime.now(timezone.utc).isoformat(),
    )
