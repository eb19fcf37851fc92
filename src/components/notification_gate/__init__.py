"""
Notification gate component - permission prompt eligibility and cooldown.
"""

from ._impl import (
    COOLDOWN_STORAGE_KEY,
    NotificationGateConfig,
    NotificationGatePolicy,
)

__all__ = [
    "COOLDOWN_STORAGE_KEY",
    "NotificationGateConfig",
    "NotificationGatePolicy",
]
