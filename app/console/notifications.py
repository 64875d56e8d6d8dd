"""User-facing notifications raised by console handlers.

Notifications mirror toast semantics: a short title, a description and a
variant. Handlers never print; they report through a `NotificationLog`, which
the presentation layer renders (optionally via a listener callback).
"""

from dataclasses import dataclass, field
from typing import Callable, Literal

Variant = Literal["default", "destructive"]


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: Variant = "default"

    @property
    def destructive(self) -> bool:
        return self.variant == "destructive"


@dataclass
class NotificationLog:
    """Ordered collector of notifications with an optional listener."""

    entries: list[Notification] = field(default_factory=list)
    listener: Callable[[Notification], None] | None = None

    def notify(self, title: str, description: str, variant: Variant = "default") -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.entries.append(notification)
        if self.listener is not None:
            self.listener(notification)
        return notification

    @property
    def latest(self) -> Notification | None:
        return self.entries[-1] if self.entries else None

    def clear(self) -> None:
        self.entries.clear()
