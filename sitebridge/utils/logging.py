"""
Logging setup for sitebridge

Every record is stamped with the slug of the site bound to the current
request, or "-" outside a request.
"""
import json
import logging
from datetime import datetime, timezone


class SiteFilter(logging.Filter):
    """Logging filter to add the active site to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        from sitebridge.services.site_loader import current_site_name

        record.site = current_site_name() or "-"
        return True


class StructuredFormatter(logging.Formatter):
    """JSON formatter for log aggregation systems."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "site": getattr(record, "site", "-"),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON formatter (True for production)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - [%(site)s] %(message)s"))
    handler.addFilter(SiteFilter())

    root_logger.addHandler(handler)

    for logger_name, level in {"sitebridge": log_level, "uvicorn.access": "WARNING"}.items():
        logging.getLogger(logger_name).setLevel(getattr(logging, level.upper()))
