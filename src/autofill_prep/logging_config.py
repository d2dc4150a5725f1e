import logging

from autofill_prep.configuration import settings


def configure_logging(level: str | None = None):
    """Configure basic structured logging for the service.

    Uses a simple format including level, module, and message. Safe to call
    repeatedly; an already configured root logger is left alone.
    """
    if logging.getLogger().handlers:
        # Already configured (avoid duplicate handlers in reload / dev)
        return
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    logging.basicConfig(level=(level or settings.log_level), format=fmt)


def get_logger(name: str):
    configure_logging()
    return logging.getLogger(name)
