"""Process-wide registration table binding view classes to services.

A registration declares, for one view class:
1. The service class that answers on the view's behalf
2. The method names the view delegates to that service
3. The lifecycle events the service handles, and which method handles each

Registrations are keyed by the exact view class. Lookups never walk the
MRO, so subclasses that need delegation register on their own.

Usage:
    from lackeys.registration import register, lookup

    register(AuditService, Order, lambda r: (
        r.add_method("audit_log")
         .add_callback("after_save", "record_save")
    ))

    registration = lookup(Order)
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from lackeys.exceptions import RegistrationError
from lackeys.lib.config_manager import config
from lackeys.lib.logging_config import log_with_context

logger = logging.getLogger(__name__)


@dataclass
class Registration:
    """Binding of a view class to a service class.

    Attributes:
        service_class: Class instantiated to serve the view
        view_class: Class whose instances delegate to the service
        method_names: Names of methods the view delegates
        callback_map: Lifecycle event name -> service method name
    """

    service_class: type
    view_class: type
    method_names: set[str] = field(default_factory=set)
    callback_map: dict[str, str] = field(default_factory=dict)

    def has_method(self, name: str) -> bool:
        """Check whether the view delegates a method name."""
        return str(name) in self.method_names

    def callback_for(self, event_name: str) -> Optional[str]:
        """Get the service method mapped to a lifecycle event."""
        return self.callback_map.get(str(event_name))


class RegistrationBuilder:
    """Collects methods and callbacks for a registration being declared.

    Passed to the configure callable given to register(). Each method
    returns the builder so declarations chain.
    """

    def __init__(self, registration: Registration):
        self._registration = registration

    @staticmethod
    def _normalize(name: object, kind: str) -> str:
        normalized = str(name).strip() if name is not None else ""
        if not normalized:
            raise RegistrationError(f"{kind} name must be a non-empty string")
        return normalized

    def add_method(self, name: str) -> "RegistrationBuilder":
        """Delegate a method name to the service."""
        self._registration.method_names.add(self._normalize(name, "Method"))
        return self

    def add_callback(self, event_name: str, method_name: str) -> "RegistrationBuilder":
        """Map a lifecycle event to a service method, replacing any earlier mapping."""
        event = self._normalize(event_name, "Event")
        self._registration.callback_map[event] = self._normalize(method_name, "Method")
        return self


# Global table of registrations, keyed by view class
_registrations: dict[type, Registration] = {}
_write_lock = threading.RLock()
_frozen = False


def register(
    service_class: type,
    view_class: type,
    configure: Optional[Callable[[RegistrationBuilder], object]] = None,
) -> Registration:
    """Register a service class to answer for a view class.

    Re-registering a view class replaces its previous registration
    entirely; nothing is merged.

    Args:
        service_class: Class instantiated (with no arguments) to serve the view
        view_class: Class whose instances delegate to the service
        configure: Callable receiving a RegistrationBuilder

    Returns:
        The stored Registration

    Raises:
        RegistrationError: If the table is frozen or a declared name is empty
    """
    registration = Registration(service_class=service_class, view_class=view_class)
    if configure is not None:
        configure(RegistrationBuilder(registration))

    with _write_lock:
        if _frozen:
            raise RegistrationError(
                f"Registration table is frozen; cannot register {service_class.__name__} "
                f"for {view_class.__name__}"
            )

        previous = _registrations.get(view_class)
        if previous is not None and config.get("LACKEYS_WARN_ON_REREGISTER"):
            log_with_context(
                logger,
                "warning",
                f"Replacing registration for {view_class.__name__}: "
                f"{previous.service_class.__name__} -> {service_class.__name__}",
                view_class=view_class.__qualname__,
                previous_service=previous.service_class.__qualname__,
                service=service_class.__qualname__,
            )

        _registrations[view_class] = registration

    logger.debug(
        f"Registered {service_class.__name__} for {view_class.__name__} "
        f"({len(registration.method_names)} methods, "
        f"{len(registration.callback_map)} callbacks)"
    )
    return registration


def lookup(view_class: type) -> Optional[Registration]:
    """Get the registration for exactly this view class.

    Args:
        view_class: View class to look up

    Returns:
        Registration, or None if the class is not registered
    """
    return _registrations.get(view_class)


def unregister(view_class: type) -> Optional[Registration]:
    """Remove and return the registration for a view class.

    Raises:
        RegistrationError: If the table is frozen
    """
    with _write_lock:
        if _frozen:
            raise RegistrationError(
                f"Registration table is frozen; cannot unregister {view_class.__name__}"
            )
        return _registrations.pop(view_class, None)


def get_all_registrations() -> dict[type, Registration]:
    """Get a snapshot of every registration, keyed by view class."""
    return dict(_registrations)


def freeze_registry() -> None:
    """Reject further writes to the table.

    Call once all services are loaded; lookups are unaffected.
    """
    global _frozen
    with _write_lock:
        _frozen = True
    logger.info(f"Registration table frozen with {len(_registrations)} entries")


def is_frozen() -> bool:
    """Check whether the table rejects writes."""
    return _frozen


def clear_registry() -> None:
    """Clear and unfreeze the registration table. For testing only."""
    global _frozen
    with _write_lock:
        _registrations.clear()
        _frozen = False
