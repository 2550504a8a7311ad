"""Manager modules for Muslim Companion integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager, get_event_signal
from .notification_manager import NotificationManager
from .tracker_manager import NotInitialized, TrackerManager

__all__ = [
    "BaseManager",
    "NotInitialized",
    "NotificationManager",
    "TrackerManager",
    "get_event_signal",
]
