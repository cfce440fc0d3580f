"""Suspend reason notifications for user-facing surfaces"""

import logging
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from .config import SuspendConfig, get_config_dir
from .sources import SuspendSource

logger = logging.getLogger(__name__)


class ReasonNotification(BaseModel):
    """The active suspend reason changed"""

    reason: str | None
    suspended: bool
    message: str
    timestamp: datetime
    delivered: dict[str, bool] = {}


class ReasonNotifier:
    """Turn reason changes into notifications on the configured channels

    An instance is meant to be passed as the arbitrator's on_reason_changed
    callback.
    """

    def __init__(self, config: SuspendConfig, notification_log: Path | None = None):
        from .notification_channels import ConsoleNotificationChannel, FileNotificationChannel

        self.config = config
        self.notification_log = notification_log or (get_config_dir() / "notifications.log")
        self.last_notification: ReasonNotification | None = None

        self.channels = {
            "console": ConsoleNotificationChannel(),
            "file": FileNotificationChannel(self.notification_log),
        }

    def message_for(self, reason: SuspendSource | None) -> str:
        if reason == SuspendSource.SMART_SUSPEND:
            return self.config.smart_suspend_active_text
        if reason == SuspendSource.DOZE:
            return self.config.doze_active_text
        return self.config.resumed_text

    def __call__(self, reason: SuspendSource | None) -> None:
        notification = ReasonNotification(
            reason=reason.name if reason else None,
            suspended=reason is not None,
            message=self.message_for(reason),
            timestamp=datetime.now(),
        )
        self.dispatch(notification)
        self.last_notification = notification

    def dispatch(self, notification: ReasonNotification) -> dict[str, bool]:
        """Deliver to every configured channel"""
        results = {}

        for channel_name in self.config.notification_channels:
            channel = self.channels.get(channel_name)
            if not channel:
                results[channel_name] = False
                continue

            try:
                success = channel.send(notification)
            except Exception as e:
                logger.warning("Error delivering to %s: %s", channel_name, e)
                success = False
            results[channel_name] = success
            notification.delivered[channel_name] = success

        return results
