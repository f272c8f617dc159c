"""User-visible, non-blocking notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    destructive: bool = False


class Notifier(Protocol):
    """Anything that can show a notification to the user."""

    def notify(self, notification: Notification) -> None: ...


class NotificationLog:
    """Notifier that records notifications in order and mirrors them to the log."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        level = logging.WARNING if notification.destructive else logging.INFO
        logger.log(level, "%s: %s", notification.title, notification.description)
        self.notifications.append(notification)

    @property
    def errors(self) -> list[Notification]:
        return [n for n in self.notifications if n.destructive]
