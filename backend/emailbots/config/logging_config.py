import logging
from logging.handlers import RotatingFileHandler
import io
import sys
from pathlib import Path
from contextvars import ContextVar
from emailbots.config.settings import Config

NO_CORRELATION_ID = "NO Correlation ID"

# Set per request by CorrelationIdMiddleware, read by every log record
correlation_id_var: ContextVar[str] = ContextVar(
    "correlation_id", default=NO_CORRELATION_ID
)

# Third-party loggers that stay at WARNING whatever LOG_LEVEL says
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "openai",
    "openai._base_client",
    "prisma",
    "prisma.engine",
    "uvicorn.access",
    "asyncio",
)


class CorrelationIdFilter(logging.Filter):
    """Stamp the current request's correlation ID onto each record."""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get()
        return True


class SafeFormatter(logging.Formatter):
    """Formatter for records that bypassed CorrelationIdFilter."""

    def format(self, record):
        if not hasattr(record, "correlation_id"):
            record.correlation_id = NO_CORRELATION_ID
        return super().format(record)


def _build_handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(SafeFormatter(Config.LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    handler.set_name("emailbots")
    return handler


def setup_logging(level: str = "INFO", log_file: str | None = None):
    root = logging.getLogger()
    root.setLevel(logging.WARNING)

    # Calling twice (reload, tests) must not duplicate output
    for existing in [h for h in root.handlers if h.get_name() == "emailbots"]:
        root.removeHandler(existing)
        existing.close()

    root.addHandler(
        _build_handler(
            logging.StreamHandler(io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8"))
        )
    )
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(
            _build_handler(
                RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
            )
        )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app_logger = logging.getLogger("emailbots")
    app_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    app_logger.info("Logging is set up.")
    return root
