"""Short code access log.

Every redirect lookup, hit or miss, is written as a url_access event. When
file logging is on these events also go to their own text and JSON files
through loguru's enqueued sinks, so writing them never blocks a request.
"""

from datetime import datetime, timezone
from typing import List, Optional

from loguru import logger

from shortlink.core.config import settings

URL_ACCESS_EVENT = "url_access"
ACCESS_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {extra[status_code]} | "
    "IP:{extra[ip]} | Code:{extra[short_code]} | {message}"
)

url_access_logger = None
_sink_ids: List[int] = []


def _is_url_access(record) -> bool:
    return record["extra"].get("event_type") == URL_ACCESS_EVENT


def setup_url_logging():
    """Bind the access logger and attach its file sinks."""
    global url_access_logger

    url_access_logger = logger.bind(event_type=URL_ACCESS_EVENT)

    # Re-running setup must not duplicate sinks
    shutdown_url_logging()

    if not settings.LOG_FILE_ENABLED:
        return url_access_logger

    common = dict(
        rotation=settings.LOG_ROTATION,
        retention=settings.LOG_RETENTION,
        enqueue=True,
        level="INFO",
        filter=_is_url_access,
    )
    _sink_ids.append(logger.add(
        f"{settings.LOG_DIR}/url_access.log",
        format=ACCESS_LOG_FORMAT,
        backtrace=False,
        diagnose=False,
        **common,
    ))
    _sink_ids.append(logger.add(
        f"{settings.LOG_DIR}/url_access.json",
        serialize=True,
        **common,
    ))

    return url_access_logger


def shutdown_url_logging() -> None:
    """Remove the access log sinks, flushing their queues."""
    while _sink_ids:
        sink_id = _sink_ids.pop()
        try:
            logger.remove(sink_id)
        except ValueError:
            # Already removed by a global logger.remove()
            pass


def log_url_access(
    short_code: str,
    ip_address: str,
    user_agent: str = "",
    status_code: int = 301,
    original_url: Optional[str] = None,
):
    """
    Record one lookup of a short code.

    Args:
        short_code: The code that was requested
        ip_address: The client's IP address
        user_agent: Optional user agent string
        status_code: Status returned to the client (301 hit, 404 miss)
        original_url: Redirect target, for hits
    """
    if not settings.URL_ACCESS_LOGGING_ENABLED:
        return

    if url_access_logger is None:
        setup_url_logging()

    outcome = f"redirected to {original_url}" if original_url else "not found"
    url_access_logger.bind(
        ip=ip_address,
        short_code=short_code,
        user_agent=user_agent,
        status_code=status_code,
        timestamp=datetime.now(timezone.utc).isoformat(),
    ).info(f"{short_code} {outcome}")
