"""Application-wide context shared by the CLI and GUI entry points."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .di.container import Container
    from .gui.factories.controller_factory import ControllerFactory
    from .settings.manager import SettingsManager
    from .settings.theme import ThemeService

LOGGER = logging.getLogger(__name__)


def _create_settings_manager() -> "SettingsManager":
    from .errors import SettingsError
    from .settings.manager import SettingsManager

    manager = SettingsManager()
    try:
        manager.load()
    except SettingsError as exc:
        LOGGER.warning("Settings file %s is unusable, restoring defaults: %s", manager.path, exc)
        manager.reset()
    return manager


@dataclass
class AppContext:
    """Settings plus a bootstrapped DI container, built on first use."""

    settings: "SettingsManager" = field(default_factory=_create_settings_manager)
    use_qt: bool = True
    _container: Optional["Container"] = field(default=None, init=False, repr=False)

    @property
    def container(self) -> "Container":
        if self._container is None:
            from .di.bootstrap import bootstrap
            from .di.container import Container

            container = Container()
            bootstrap(container, self.settings, use_qt=self.use_qt)
            self._container = container
        return self._container

    @property
    def theme(self) -> "ThemeService":
        from .settings.theme import ThemeService

        return self.container.resolve(ThemeService)

    @property
    def controllers(self) -> "ControllerFactory":
        from .gui.factories.controller_factory import ControllerFactory

        return self.container.resolve(ControllerFactory)
