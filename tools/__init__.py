"""
Tools Package
Utility tools for the DoseKeeper system
"""

from .time_utils import (
    ensure_time,
    ensure_datetime,
    weekday_index,
    local_today
)

from .push_sender import (
    PushSender,
    PushRecord,
    LoggingPushSender,
    ExpoPushSender,
    get_push_sender
)

__all__ = [
    # Time Utilities
    "ensure_time",
    "ensure_datetime",
    "weekday_index",
    "local_today",

    # Push Sender
    "PushSender",
    "PushRecord",
    "LoggingPushSender",
    "ExpoPushSender",
    "get_push_sender"
]
