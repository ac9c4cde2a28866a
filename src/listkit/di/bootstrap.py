import logging

from .container import Container
from listkit.errors.handler import ErrorHandler
from listkit.events.bus import EventBus
from listkit.settings.manager import SettingsManager
from listkit.settings.theme import ThemeService


def bootstrap(container: Container, settings: SettingsManager, *, use_qt: bool = True) -> None:
    """Register all application services in the DI container."""
    from listkit.gui.factories.controller_factory import ControllerFactory

    container.register_singleton(EventBus, EventBus, logger=logging.getLogger("listkit.events"))
    container.register_instance(SettingsManager, settings)
    container.register_factory(
        ThemeService,
        lambda: ThemeService(container.resolve(SettingsManager)),
        singleton=True,
    )
    container.register_factory(
        ErrorHandler,
        lambda: ErrorHandler(logging.getLogger("listkit"), container.resolve(EventBus)),
        singleton=True,
    )
    container.register_factory(
        ControllerFactory,
        lambda: ControllerFactory(container, use_qt=use_qt),
        singleton=True,
    )
