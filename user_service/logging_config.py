"""Logging setup with per-request correlation IDs."""

import logging
from contextvars import ContextVar

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"


class CorrelationIdFilter(logging.Filter):
    """Attach the current request's correlation ID to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging. Unknown level names fall back to INFO."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, CorrelationIdFilter) for f in handler.filters):
            handler.addFilter(CorrelationIdFilter())
    for noisy in ("httpcore", "httpx", "passlib"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
