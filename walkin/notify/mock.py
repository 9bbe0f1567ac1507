"""Mock notifier for testing.

Records every send attempt in memory. Can be told to fail or to raise so the
trigger's error handling can be exercised.
"""

from dataclasses import dataclass

from .base import Notifier, NotifyResult


@dataclass
class SentNotice:
    address: str
    position: int


class MockNotifier(Notifier):
    """In-memory notifier."""

    def __init__(self, fail: bool = False, raise_error: Exception | None = None) -> None:
        self.fail = fail
        self.raise_error = raise_error
        self.attempts: list[SentNotice] = []
        self.sent: list[SentNotice] = []

    def send(self, address: str, position: int) -> NotifyResult:
        notice = SentNotice(address=address, position=position)
        self.attempts.append(notice)
        if self.raise_error is not None:
            raise self.raise_error
        if self.fail:
            return NotifyResult(success=False, error="mock failure")
        self.sent.append(notice)
        return NotifyResult(success=True)
