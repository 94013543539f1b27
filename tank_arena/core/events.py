"""Minimal listener registry used for engine lifecycle events."""

from __future__ import annotations

from typing import Callable, Generic, List, TypeVar

Listener = TypeVar("Listener", bound=Callable[..., object])


class EventHook(Generic[Listener]):
    """Ordered list of callbacks invoked synchronously on ``emit``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: List[Listener] = []

    def subscribe(self, callback: Listener) -> None:
        self._listeners.append(callback)

    def emit(self, *args: object) -> None:
        for callback in list(self._listeners):
            callback(*args)

    def __len__(self) -> int:
        return len(self._listeners)


__all__ = ["EventHook"]
