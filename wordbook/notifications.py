"""Sequential display of user-facing notifications."""

import time
from typing import Callable

from wordbook.logger import get_logger
from wordbook.models import Notification


class Notifier:
    """Shows notifications in order, honouring each one's delay."""

    def __init__(
        self,
        emit: Callable[[str], None] = print,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.emit = emit
        self.sleep = sleep
        self.history: list[str] = []

    def show(self, notifications: list[Notification]) -> None:
        for notification in notifications:
            if notification.delay > 0:
                self.sleep(notification.delay)
            self.emit(notification.message)
            self.history.append(notification.message)
            get_logger().info(f"Notification: {notification.message}")

    def say(self, message: str) -> None:
        self.show([Notification(message=message)])
