"""Per-session notification queue.

Replaces a process-wide toast singleton with an explicit object owned by a
session.  Entering the context starts a fresh queue; leaving it discards
whatever was not consumed.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

NotificationType = Literal["success", "error", "warning", "info"]

DEFAULT_DURATION_MS = 5000


@dataclass(frozen=True)
class Notification:
    """A user-facing message."""

    id: str
    type: NotificationType
    title: str
    message: str | None = None
    duration: int = DEFAULT_DURATION_MS


class NotificationCenter:
    """Ordered queue of pending notifications."""

    def __init__(self):
        self._pending: list[Notification] = []
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)

    def add(
        self,
        type: NotificationType,
        title: str,
        message: str | None = None,
        duration: int = DEFAULT_DURATION_MS,
    ) -> Notification:
        notification = Notification(
            id=uuid.uuid4().hex,
            type=type,
            title=title,
            message=message,
            duration=duration,
        )
        self._pending.append(notification)
        log = logger.warning if type == "error" else logger.info
        log(f"[{type}] {title}" + (f": {message}" if message else ""))
        return notification

    def dismiss(self, notification_id: str) -> bool:
        before = len(self._pending)
        self._pending = [n for n in self._pending if n.id != notification_id]
        return len(self._pending) != before

    def drain(self) -> list[Notification]:
        """Return and clear all pending notifications."""
        drained, self._pending = self._pending, []
        return drained

    async def __aenter__(self) -> NotificationCenter:
        self._pending = []
        self._active = True
        return self

    async def __aexit__(self, *exc_info) -> None:
        self._pending = []
        self._active = False
