"""Eventos multicast del ResourceManager."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from core.resources.manager import ResourceManager

T = TypeVar("T")

Listener = Callable[["ResourceManager", T], None]


class ResourceManagerEvent(Generic[T]):
    """Ordered listener list; listeners receive `(manager, data)`."""

    def __init__(self) -> None:
        self.listeners: list[Listener] = []

    def add(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def remove(self, listener: Listener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def clear(self) -> None:
        self.listeners = []

    def trigger(self, manager: "ResourceManager", data: T) -> None:
        # Copy so listeners may unsubscribe while being notified.
        for listener in list(self.listeners):
            listener(manager, data)