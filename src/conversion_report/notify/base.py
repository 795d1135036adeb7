"""Abstract notifier interface."""

from abc import ABC, abstractmethod
from typing import Any

from conversion_report.models.watermark import RunWindow


def build_subject(prefix: str, window: RunWindow) -> str:
    """Subject line embedding both window bounds."""
    return f"{prefix}: {window.lower_bound} - {window.upper_bound}"


class BaseNotifier(ABC):
    """Delivers report text to a fixed destination."""

    @abstractmethod
    def send(self, sender: str, recipient: str, subject: str, text: str) -> Any:
        """Send a plain-text message. Raises NotificationError."""
        pass

    def close(self) -> None:
        pass
