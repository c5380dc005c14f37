"""Notification module for the Temperature Market Bot."""

from .notifier import Notifier
from .templates import MessageTemplates

__all__ = ["Notifier", "MessageTemplates"]
