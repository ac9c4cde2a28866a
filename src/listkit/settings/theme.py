"""Process-wide theme preference backed by the settings store."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import AVAILABLE_THEMES, DEFAULT_THEME
from ..errors import ThemeNotFoundError
from ..gui.viewmodels.signal import Signal
from .manager import SettingsManager

LOGGER = logging.getLogger(__name__)

THEME_KEY = "ui.theme"


class ThemeService:
    """Hold the active theme for the lifetime of the process.

    The service is constructed explicitly and registered as a container
    singleton. :meth:`initialise` reads the persisted preference once; there
    is no teardown.
    """

    def __init__(self, settings: SettingsManager, default_theme: str = DEFAULT_THEME) -> None:
        if default_theme not in AVAILABLE_THEMES:
            raise ThemeNotFoundError(default_theme)
        self._settings = settings
        self._default = default_theme
        self._theme: Optional[str] = None
        self.theme_changed = Signal()

    @staticmethod
    def available_themes() -> list[tuple[str, str]]:
        """Return ``(identifier, display name)`` pairs in display order."""
        return list(AVAILABLE_THEMES.items())

    def initialise(self) -> str:
        """Read the persisted theme, falling back to the default."""
        stored = self._settings.get(THEME_KEY)
        if stored in AVAILABLE_THEMES:
            self._theme = stored
        else:
            if stored is not None:
                LOGGER.warning("Ignoring unknown persisted theme %r", stored)
            self._theme = self._default
        return self._theme

    @property
    def theme(self) -> str:
        if self._theme is None:
            return self.initialise()
        return self._theme

    def set_theme(self, theme: str) -> None:
        """Activate and persist *theme*."""
        if theme not in AVAILABLE_THEMES:
            raise ThemeNotFoundError(f"Unknown theme: {theme}")
        if theme == self._theme:
            return
        self._settings.set(THEME_KEY, theme)
        self._theme = theme
        self.theme_changed.emit(theme)
