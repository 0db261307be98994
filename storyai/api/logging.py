"""Structured logging infrastructure for the API layer.

Provides JSON-formatted logging for production and human-readable
logging for development, plus a BookLogger helper for book generation events.
"""

import json
import logging
import sys
from datetime import datetime, timezone

# Extra fields copied onto the JSON record when present
EXTRA_FIELDS = (
    "book_id",
    "page_number",
    "stage",
    "duration",
    "attempt",
    "error_type",
    "percentage",
)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Create console handler
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)


class BookLogger:
    """Logger for book generation events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("book_generation")

    def generation_started(self, book_id: str, user_id: str) -> None:
        self.logger.info(
            "Book generation started",
            extra={"book_id": book_id, "stage": "started", "user_id": user_id},
        )

    def stage_completed(self, book_id: str, stage: str, duration: float = None) -> None:
        extra = {"book_id": book_id, "stage": stage}
        if duration:
            extra["duration"] = round(duration, 2)
        self.logger.info(f"Stage completed: {stage}", extra=extra)

    def generation_completed(self, book_id: str, duration: float) -> None:
        self.logger.info(
            "Book generation completed",
            extra={"book_id": book_id, "stage": "completed", "duration": round(duration, 2)},
        )

    def generation_failed(self, book_id: str, error: Exception, stage: str = None) -> None:
        extra = {"book_id": book_id, "stage": "failed", "error_type": type(error).__name__}
        if stage:
            extra["failed_at_stage"] = stage
        self.logger.error(f"Book generation failed: {error}", extra=extra, exc_info=True)

    def step_failed(self, book_id: str, stage: str, error: Exception, page_number: int = None) -> None:
        """An optional step failed; generation continues without it."""
        extra = {"book_id": book_id, "stage": stage, "error_type": type(error).__name__}
        if page_number is not None:
            extra["page_number"] = page_number
        self.logger.warning(f"{stage} failed: {error}", extra=extra)

    def batch_progress(self, book_id: str, completed: int, total: int) -> None:
        percentage = round(completed / total * 100) if total else 100
        self.logger.info(
            f"Illustrations {completed}/{total} ({percentage}%)",
            extra={"book_id": book_id, "stage": "illustrations", "percentage": percentage},
        )


# Global book logger instance
book_logger = BookLogger()
