"""Notification channel implementations"""

import json
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from smart_suspend.notification_dispatcher import ReasonNotification


class ConsoleNotificationChannel:
    """Console-based notifications using Rich"""

    def send(self, notification: "ReasonNotification") -> bool:
        from rich.console import Console
        from rich.panel import Panel

        console = Console()

        icon = "⏸️" if notification.suspended else "▶️"
        color = "yellow" if notification.suspended else "green"
        reason = notification.reason or "none"

        panel = Panel(
            f"{notification.message}\n\n[dim]reason: {reason} · "
            f"{notification.timestamp.strftime('%Y-%m-%d %H:%M:%S')}[/dim]",
            title=f"{icon} smart-suspend",
            border_style=color,
        )

        console.print(panel)

        return True


class FileNotificationChannel:
    """File-based notification log (append-only)"""

    def __init__(self, log_file: Path):
        self.log_file = log_file

    def send(self, notification: "ReasonNotification") -> bool:
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        log_entry = {
            "timestamp": notification.timestamp.isoformat(),
            "reason": notification.reason,
            "suspended": notification.suspended,
            "message": notification.message,
        }

        # Append as JSONL
        with open(self.log_file, "a") as f:
            f.write(json.dumps(log_entry) + "\n")

        return True
