"""BaseViewModel: pure Python, no Qt dependency.

Tracks the signal connections a ViewModel makes to its collaborators so that
``dispose()`` can release them in one place when the view goes away.
"""

from __future__ import annotations

from typing import Callable

from listkit.gui.viewmodels.signal import Signal


class BaseViewModel:
    """ViewModel base class: pure Python, no Qt dependency."""

    def __init__(self) -> None:
        self._connections: list[tuple[Signal, Callable]] = []
        self._disposed = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def bind(self, signal: Signal, handler: Callable) -> None:
        """Connect *handler* to a collaborator's *signal* and track it."""
        signal.connect(handler)
        self._connections.append((signal, handler))

    def dispose(self) -> None:
        """Disconnect tracked handlers."""
        for signal, handler in self._connections:
            try:
                signal.disconnect(handler)
            except ValueError:
                pass
        self._connections.clear()
        self._disposed = True
