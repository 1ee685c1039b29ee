"""Mixin that lets a view class delegate to its registered service.

RailsBase gives each view instance a memoized Registry and routes three
things through it:
1. Capability queries (responds_to)
2. Attribute access that normal lookup cannot satisfy (__getattr__)
3. Lifecycle events, when the class is also a Callbacks host

Usage:
    class Order(Callbacks, RailsBase):
        def save(self):
            return self.run_callbacks("save", self._write)

    order = Order()
    order.audit_log()          # forwarded to the registered service
    order.save()               # fires before_save / after_save on the service
"""

import logging
import threading
from functools import partial
from typing import Any

from lackeys.callbacks import CALLBACK_KINDS, Callbacks
from lackeys.exceptions import CallbackError
from lackeys.lib.config_manager import config
from lackeys.registry import Registry

logger = logging.getLogger(__name__)

DEFAULT_CALLBACK_EVENTS: tuple[str, ...] = tuple(config.get_list("LACKEYS_CALLBACK_EVENTS"))

# Attributes that must never be resolved through the registry
_INTERNAL_NAMES = frozenset({
    "registry",
    "_lackeys_registry",
    "_lackeys_wired_events",
    "lackeys_callback_events",
})

_registry_lock = threading.Lock()


def split_event(event_name: str) -> tuple[str, str]:
    """Split "before_save" into ("before", "save").

    Raises:
        CallbackError: If the name is not <kind>_<group> with a known kind
    """
    kind, sep, group = str(event_name).partition("_")
    if not sep or not group or kind not in CALLBACK_KINDS:
        raise CallbackError(
            f"Lifecycle event '{event_name}' must look like before_<group> or after_<group>"
        )
    return kind, group


def _forward_event(event_name: str):
    def hook(view: "RailsBase") -> None:
        view.registry.fire_event(event_name)

    hook.__name__ = f"forward_{event_name}"
    return hook


class RailsBase:
    """Delegating mixin for view classes.

    Set `lackeys_callback_events` on a class to change which lifecycle
    events are forwarded to the service.
    """

    lackeys_callback_events: tuple[str, ...] = DEFAULT_CALLBACK_EVENTS

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        if not issubclass(cls, Callbacks):
            return
        # Hooks are inherited, so only events no ancestor has wired get a hook here
        wired = getattr(cls, "_lackeys_wired_events", frozenset())
        added = []
        for event_name in cls.lackeys_callback_events:
            kind, group = split_event(event_name)
            if event_name in wired or event_name in added:
                continue
            cls.define_model_callbacks(group)
            cls.set_callback(group, kind, _forward_event(event_name))
            added.append(event_name)
        cls._lackeys_wired_events = wired | frozenset(added)
        if added:
            logger.debug(f"Wired lifecycle events on {cls.__name__}: {', '.join(added)}")

    def __getstate__(self):
        # A copy gets its own registry, and with it its own service
        parent = getattr(super(), "__getstate__", None)
        state = parent() if parent is not None else self.__dict__
        if isinstance(state, dict) and "_lackeys_registry" in state:
            state = dict(state)
            del state["_lackeys_registry"]
        return state

    @property
    def registry(self) -> Registry:
        """This instance's Registry, created on first access."""
        registry = self.__dict__.get("_lackeys_registry")
        if registry is None:
            with _registry_lock:
                registry = self.__dict__.get("_lackeys_registry")
                if registry is None:
                    registry = Registry(self)
                    self.__dict__["_lackeys_registry"] = registry
        return registry

    def responds_to(self, name: str, include_private: bool = False) -> bool:
        """Check whether the instance answers to a member name.

        Delegated methods count first. Otherwise the answer comes from a
        responds_to further up the MRO, or from normal attribute lookup.
        """
        name = str(name)
        if self.registry.has_method(name):
            return True
        if name.startswith("_") and not include_private:
            return False

        parent = getattr(super(), "responds_to", None)
        if parent is not None:
            return parent(name, include_private)

        try:
            object.__getattribute__(self, name)
        except AttributeError:
            return False
        return True

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("__") and name not in _INTERNAL_NAMES:
            registry = self.registry
            if registry.has_method(name):
                return partial(registry.call, name)

        parent = getattr(super(), "__getattr__", None)
        if parent is not None:
            return parent(name)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __dir__(self):
        return sorted(set(super().__dir__()) | self.registry.method_names())
