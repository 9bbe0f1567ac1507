"""Notifier implementations for queue position notices."""

from .base import Notifier, NotifyResult, render_message
from .mock import MockNotifier
from .smtp import SmtpNotifier

__all__ = ["Notifier", "NotifyResult", "render_message", "MockNotifier", "SmtpNotifier"]
