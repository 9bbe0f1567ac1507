"""Notifier interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class NotifyResult:
    """Outcome of one send attempt."""

    success: bool
    error: str | None = None


class Notifier(ABC):
    """Sends "you're almost up" messages to customers.

    Implementations must not raise when they are not configured; they return
    a failed NotifyResult instead.
    """

    @abstractmethod
    def send(self, address: str, position: int) -> NotifyResult:
        """Tell the customer at ``address`` they are now at ``position``."""


def render_message(position: int) -> tuple[str, str, str]:
    """Subject, plain-text body and HTML body for a position notice."""
    ahead = position - 1
    people = "person" if ahead == 1 else "people"
    subject = "You're almost up!"
    text = f"You're now position {position}. Only {ahead} {people} ahead of you."
    html = f"<p>You're now position <b>{position}</b>. Only {ahead} {people} ahead of you.</p>"
    return subject, text, html
