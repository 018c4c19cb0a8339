# =============================================================================
# app/logging_config.py - Logging Setup
# =============================================================================
# Configures the root logger once per process.
#
# Every record carries a `request_id` attribute. Inside a request it is the
# ID bound by RequestIDMiddleware; outside a request it is "-".
# =============================================================================

import logging
from contextvars import ContextVar

from app.config import Settings

# Request ID for the request currently being handled by this task
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    """Inject the current request ID into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def configure_logging(settings: Settings) -> None:
    """
    Configure the root logger.

    DEBUG level when settings.DEBUG is set, INFO otherwise. Safe to call
    more than once; later calls replace the handler.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())

    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        handlers=[handler],
        force=True,
    )

    # httpx logs every PostgREST call at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
