"""Base class for services that answer on behalf of a view class.

A concrete service registers itself against its view class when the
class is defined, either with class keywords:

    class AuditService(ServiceBase, view=Order, methods=["audit_log"],
                       callbacks={"after_save": "record_save"}):
        def initialize_internals(self):
            self._entries = []

        def audit_log(self):
            return self._entries

        def record_save(self):
            self._entries.append(("save", self.view.id))

or explicitly, once the class exists:

    AuditService.register_for(Order, lambda r: r.add_method("audit_log"))
"""

import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from lackeys.registration import Registration, RegistrationBuilder, register

logger = logging.getLogger(__name__)


class ServiceBase:
    """Contract for service classes.

    Services are built by a view's Registry with no arguments. The registry
    then sets `view` and calls initialize_internals().
    """

    view: Any = None

    def __init_subclass__(
        cls,
        view: Optional[type] = None,
        methods: Iterable[str] = (),
        callbacks: Optional[Mapping[str, str]] = None,
        **kwargs: Any,
    ):
        super().__init_subclass__(**kwargs)
        if view is None:
            logger.debug(f"{cls.__name__} declared without a view; not registered")
            return

        method_names = list(methods)
        callback_map = dict(callbacks or {})

        def configure(r: RegistrationBuilder) -> None:
            for name in method_names:
                r.add_method(name)
            for event_name, method_name in callback_map.items():
                r.add_callback(event_name, method_name)

        register(cls, view, configure)

    @classmethod
    def register_for(
        cls,
        view_class: type,
        configure: Optional[Callable[[RegistrationBuilder], object]] = None,
    ) -> Registration:
        """Register this service for a view class."""
        return register(cls, view_class, configure)

    def initialize_internals(self) -> None:
        """Set up internal state. Called once, right after construction."""
