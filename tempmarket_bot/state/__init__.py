"""Tracking state module for the Temperature Market Bot."""

from .tracker import TrackingState
from .models import TrackingEntry

__all__ = [
    "TrackingState",
    "TrackingEntry"
]
