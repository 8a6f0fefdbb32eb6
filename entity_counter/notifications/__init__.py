"""Change notification adapters."""

from .notification_center import NotificationCenter, default_notification_center
from .subscription import QueueSubscription

__all__ = ["NotificationCenter", "QueueSubscription", "default_notification_center"]
