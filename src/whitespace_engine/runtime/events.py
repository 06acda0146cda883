"""Event emitters and disposable subscription handles."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional


class Disposable:
    """Handle that runs its release callback at most once."""

    def __init__(self, release: Optional[Callable[[], None]] = None) -> None:
        self._release = release
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        release, self._release = self._release, None
        if release is not None:
            release()


class CompositeDisposable:
    """Owns a group of handles so they can be released together."""

    def __init__(self, *disposables: Disposable) -> None:
        self._disposables: List[Disposable] = list(disposables)
        self.disposed = False

    def __len__(self) -> int:
        return len(self._disposables)

    def __contains__(self, disposable: object) -> bool:
        return disposable in self._disposables

    def add(self, *disposables: Disposable) -> None:
        if self.disposed:
            for disposable in disposables:
                disposable.dispose()
            return
        self._disposables.extend(disposables)

    def remove(self, disposable: Disposable) -> None:
        if disposable in self._disposables:
            self._disposables.remove(disposable)

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        pending, self._disposables = self._disposables, []
        for disposable in pending:
            disposable.dispose()


class Emitter:
    """Minimal named-event bus; ``on`` returns a handle that unsubscribes."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], object]]] = {}

    def on(self, event: str, callback: Callable[[object], object]) -> Disposable:
        self._subscribers.setdefault(event, []).append(callback)

        def _release() -> None:
            callbacks = self._subscribers.get(event, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return Disposable(_release)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)

    def listener_count(self, event: str) -> int:
        return len(self._subscribers.get(event, []))

    def clear(self) -> None:
        self._subscribers.clear()


__all__ = ["CompositeDisposable", "Disposable", "Emitter"]
