"""Delegate view methods and lifecycle events to registered services.

This package provides:
- A process-wide registration table binding view classes to services
- A per-instance Registry that lazily builds the service and forwards to it
- RailsBase, a mixin routing unknown attributes and lifecycle events to the Registry
- Callbacks, a small lifecycle host with before/after chains
- ServiceBase, the base class services derive from

Usage:
    from lackeys import Callbacks, RailsBase, ServiceBase

    class Order(Callbacks, RailsBase):
        pass

    class OrderService(ServiceBase, view=Order, methods=["total"],
                       callbacks={"before_save": "check_stock"}):
        def total(self):
            return 42

        def check_stock(self):
            ...

    Order().total()                     # 42
    Order().run_callbacks("save")       # calls OrderService.check_stock
"""

from .exceptions import (
    RegistrationError,
    NotDelegatedError,
    CallbackError,
)

from .registration import (
    Registration,
    RegistrationBuilder,
    register,
    lookup,
    unregister,
    get_all_registrations,
    freeze_registry,
    is_frozen,
    clear_registry,
)

from .service_base import ServiceBase
from .registry import Registry
from .callbacks import Callbacks, AbortCallbacks
from .rails_base import RailsBase, DEFAULT_CALLBACK_EVENTS

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "RegistrationError",
    "NotDelegatedError",
    "CallbackError",
    # Registration table
    "Registration",
    "RegistrationBuilder",
    "register",
    "lookup",
    "unregister",
    "get_all_registrations",
    "freeze_registry",
    "is_frozen",
    "clear_registry",
    # Dispatch
    "Registry",
    "ServiceBase",
    # Lifecycle
    "Callbacks",
    "AbortCallbacks",
    "RailsBase",
    "DEFAULT_CALLBACK_EVENTS",
]
