"""Audit trail for waitlist and schedule operations."""

import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

OPERATIONS = frozenset(
    {
        "JOIN",
        "JOIN_REJECTED",
        "LEAVE",
        "SERVE",
        "PRIORITY",
        "NOTIFY",
        "NOTIFY_FAILED",
        "HOURS",
        "CLOSURE",
        "ANNOUNCE",
    }
)


class AuditLogger:
    """Appends one line per operation to an audit file.

    Log format: ISO8601_TIMESTAMP [OPERATION] location=ID key1=value1 key2=value2
    Example: 2026-02-01T10:00:00Z [SERVE] location=shop-1 entry=4f0c... customer=c-17
    """

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path

    def log(self, operation: str, location: str, **kwargs: str | int | float | bool | None) -> None:
        """Append an audit line.

        Args:
            operation: One of OPERATIONS.
            location: Location the operation applied to.
            **kwargs: Extra key=value pairs. None values are skipped and
                values containing spaces are quoted.

        Raises:
            ValueError: If the operation name is unknown.
        """
        if operation not in OPERATIONS:
            raise ValueError(f"Unknown audit operation: {operation}")

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        pairs = [f"location={_quote(location)}"]
        pairs.extend(
            f"{key}={_quote(value)}" for key, value in kwargs.items() if value is not None
        )

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, "a") as f:
            f.write(f"{timestamp} [{operation}] {' '.join(pairs)}\n")

    def read(self, operation: str | None = None) -> list[str]:
        """Lines currently in the log, optionally only one operation."""
        if not self.log_path.exists():
            return []
        lines = self.log_path.read_text().splitlines()
        if operation is None:
            return lines
        tag = f"[{operation}]"
        return [line for line in lines if tag in line]


def _quote(value: object) -> str:
    text = str(value)
    if " " in text:
        return f'"{text}"'
    return text


def record(audit: AuditLogger | None, operation: str, location: str, **kwargs) -> None:
    """Write an audit line for an operation that has already been committed.

    A missing logger is a no-op. A failed write is logged as a warning and
    never propagates, since the operation itself has succeeded.
    """
    if audit is None:
        return
    try:
        audit.log(operation, location, **kwargs)
    except OSError as e:
        logger.warning("Audit %s for %s not written: %s", operation, location, e)
