"""User-facing notifications.

Views render transient messages (toasts) through a `Notifier`. The client
only needs the four operations below; `LogNotifier` is used when the embedding
application does not provide one.
"""

from dataclasses import dataclass, field
from typing import Protocol

from campaign_client.utils.logging import get_logger

logger = get_logger(__name__)


class Notifier(Protocol):
    """Sink for transient user-facing messages."""

    def success(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def dismiss(self) -> None: ...


class LogNotifier:
    """Notifier that writes messages to the log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def info(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)

    def dismiss(self) -> None:
        pass


@dataclass
class RecordingNotifier:
    """Notifier that keeps every message as a (level, message) pair."""

    messages: list[tuple[str, str]] = field(default_factory=list)
    dismissed: int = 0

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def dismiss(self) -> None:
        self.dismissed += 1

    def of_level(self, level: str) -> list[str]:
        return [message for kind, message in self.messages if kind == level]
