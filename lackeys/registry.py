"""Per-view dispatch object.

Each view instance owns one Registry. The registry resolves the
registration for the view's runtime class, answers capability queries
from it, and lazily builds the single service instance that handles
forwarded calls and lifecycle events.
"""

import logging
import threading
from typing import Any, Optional

from lackeys.exceptions import NotDelegatedError
from lackeys.registration import Registration, lookup, register
from lackeys.service_base import ServiceBase

logger = logging.getLogger(__name__)


class Registry:
    """Dispatches delegated calls and lifecycle events for one view instance.

    Usage:
        registry = Registry(order)
        if registry.has_method("audit_log"):
            entries = registry.call("audit_log")
        registry.fire_event("after_save")
    """

    # Table access, so services can be declared as Registry.register(Service, View, configure)
    register = staticmethod(register)
    lookup = staticmethod(lookup)

    def __init__(self, owner: Any):
        self.owner = owner
        self._registration: Optional[Registration] = lookup(type(owner))
        self._service: Any = None
        self._service_lock = threading.Lock()

    def __repr__(self) -> str:
        service = self.service_class.__name__ if self.service_class else None
        return f"<Registry for {type(self.owner).__name__} service={service}>"

    @property
    def registration(self) -> Optional[Registration]:
        """The registration for the owner's class, or None."""
        return self._registration

    @property
    def service_class(self) -> Optional[type]:
        """The registered service class, or None."""
        return self._registration.service_class if self._registration else None

    @property
    def service_built(self) -> bool:
        """Whether the service instance has been constructed."""
        return self._service is not None

    @property
    def service(self) -> Any:
        """The service instance, built on first access.

        Raises:
            NotDelegatedError: If the owner's class has no registration
        """
        if self._service is not None:
            return self._service
        if self._registration is None:
            raise NotDelegatedError(type(self.owner), "service")

        with self._service_lock:
            if self._service is None:
                self._service = self._build_service()
        return self._service

    def _build_service(self) -> Any:
        service_class = self._registration.service_class
        service = service_class()
        if isinstance(service, ServiceBase):
            service.view = self.owner

        initialize = getattr(service, "initialize_internals", None)
        if callable(initialize):
            initialize()

        logger.debug(
            f"Built {service_class.__name__} for {type(self.owner).__name__} instance"
        )
        return service

    def has_method(self, name: str) -> bool:
        """Check whether the owner delegates a method. Never builds the service."""
        if self._registration is None:
            return False
        return self._registration.has_method(name)

    def method_names(self) -> frozenset[str]:
        """Names of every method the owner delegates."""
        if self._registration is None:
            return frozenset()
        return frozenset(self._registration.method_names)

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Forward a method call to the service.

        Args:
            name: Delegated method name
            *args: Positional arguments passed through unchanged
            **kwargs: Keyword arguments passed through unchanged

        Returns:
            Whatever the service method returns

        Raises:
            NotDelegatedError: If the method is not delegated
        """
        if not self.has_method(name):
            raise NotDelegatedError(type(self.owner), str(name))
        return getattr(self.service, str(name))(*args, **kwargs)

    def handles_event(self, event_name: str) -> Optional[str]:
        """Get the service method mapped to a lifecycle event, if any."""
        if self._registration is None:
            return None
        return self._registration.callback_for(event_name)

    def fire_event(self, event_name: str) -> None:
        """Run the service method mapped to a lifecycle event.

        Unmapped events are ignored.
        """
        method_name = self.handles_event(event_name)
        if method_name is None:
            logger.debug(f"{type(self.owner).__name__} has no handler for {event_name}")
            return

        getattr(self.service, method_name)()
