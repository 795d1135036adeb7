"""Logging setup, request ids and masking of the trigger's Authorization parameter."""

import logging
import re
from datetime import datetime
from typing import Any, Mapping, Optional

AUTHORIZATION = "Authorization"
MASKED_FOR_SECURITY = "*** masked for security ***"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_AUTH_PARAM_RE = re.compile(rf"([?&]{AUTHORIZATION}=)([^&]*)", re.IGNORECASE)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for CLI and server entry points."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # httpx logs every request URL at INFO, which would leak query secrets
    logging.getLogger("httpx").setLevel(logging.WARNING)


def new_request_id(now: Optional[datetime] = None) -> str:
    """Sortable id such as 20221104020812884 (millisecond resolution)."""
    now = now or datetime.now()
    return now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 1000:03d}"


def sanitize_url(url: Optional[str]) -> Optional[str]:
    """Mask the Authorization query parameter value in a URL."""
    if not url:
        return url
    return _AUTH_PARAM_RE.sub(rf"\g<1>{MASKED_FOR_SECURITY}", url)


def sanitize_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of query params with the Authorization value masked."""
    sanitized = dict(params)
    for key in sanitized:
        if key.lower() == AUTHORIZATION.lower() and sanitized[key]:
            sanitized[key] = MASKED_FOR_SECURITY
    return sanitized


class AuthorizationMaskFilter(logging.Filter):
    """
    Masks the Authorization query parameter in log records that carry a URL.
    Attached to uvicorn's access log handler, whose request line includes the
    raw query string.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = sanitize_url(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(sanitize_url(arg) if isinstance(arg, str) else arg for arg in record.args)
        return True
