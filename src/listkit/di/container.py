from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Set, Type

from .lifetime import Lifetime
from ..errors import CircularDependencyError, ResolutionError


@dataclass
class Registration:
    interface: Type
    implementation: Optional[Type] = None
    lifetime: Lifetime = Lifetime.TRANSIENT
    factory: Optional[Callable] = None
    kwargs: Dict[str, Any] = field(default_factory=dict)


class Container:
    """Small dependency container used to wire process-wide services.

    Singletons live for the lifetime of the container; tests build their own
    container to get isolated instances.
    """

    def __init__(self):
        self._registrations: Dict[Type, Registration] = {}
        self._singleton_instances: Dict[Type, Any] = {}
        self._resolving: Set[Type] = set()

    # --- Registration API ---

    def register_singleton(self, interface: Type, implementation: Optional[Type] = None, **kwargs):
        self._registrations[interface] = Registration(
            interface=interface,
            implementation=implementation or interface,
            lifetime=Lifetime.SINGLETON,
            kwargs=kwargs,
        )
        self._singleton_instances.pop(interface, None)

    def register_instance(self, interface: Type, instance: Any):
        """Register an already constructed object as the singleton for *interface*."""
        self._registrations[interface] = Registration(
            interface=interface,
            implementation=type(instance),
            lifetime=Lifetime.SINGLETON,
        )
        self._singleton_instances[interface] = instance

    def register_factory(self, interface: Type, factory: Callable, *, singleton: bool = False):
        self._registrations[interface] = Registration(
            interface=interface,
            lifetime=Lifetime.SINGLETON if singleton else Lifetime.TRANSIENT,
            factory=factory,
        )
        self._singleton_instances.pop(interface, None)

    def is_registered(self, interface: Type) -> bool:
        return interface in self._registrations

    # --- Resolution ---

    def resolve(self, interface: Type) -> Any:
        if interface not in self._registrations:
            raise ResolutionError(f"No registration found for {interface}")
        if interface in self._singleton_instances:
            return self._singleton_instances[interface]
        if interface in self._resolving:
            raise CircularDependencyError(
                f"Circular dependency detected for {interface}"
            )
        self._resolving.add(interface)
        try:
            reg = self._registrations[interface]
            if reg.lifetime == Lifetime.SINGLETON:
                instance = self._create(reg)
                self._singleton_instances[interface] = instance
                return instance
            return self._create(reg)
        finally:
            self._resolving.discard(interface)

    # --- Helpers ---

    def _create(self, reg: Registration) -> Any:
        if reg.factory:
            return reg.factory()
        impl = reg.implementation or reg.interface
        return impl(**reg.kwargs)
