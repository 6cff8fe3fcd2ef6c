"""Toast notifications shown to the editing admin."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Toast:
    kind: str
    message: str


class Notifier:
    def success(self, message: str) -> None:
        raise NotImplementedError

    def error(self, message: str) -> None:
        raise NotImplementedError


@dataclass
class LoggingNotifier(Notifier):
    """Logs every toast and keeps them in memory, newest last."""

    toasts: List[Toast] = field(default_factory=list)

    def success(self, message: str) -> None:
        logger.info("[toast] %s", message)
        self.toasts.append(Toast("success", message))

    def error(self, message: str) -> None:
        logger.warning("[toast] %s", message)
        self.toasts.append(Toast("error", message))

    @property
    def last(self) -> Optional[Toast]:
        return self.toasts[-1] if self.toasts else None

    def messages(self, kind: Optional[str] = None) -> List[str]:
        return [toast.message for toast in self.toasts if kind is None or toast.kind == kind]
