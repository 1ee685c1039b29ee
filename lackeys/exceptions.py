"""Exceptions raised by lackeys."""


class RegistrationError(ValueError):
    """Raised when a registration is malformed or the table is frozen."""


class NotDelegatedError(AttributeError):
    """Raised when a call is forwarded for a method no registration declares."""

    def __init__(self, view_class: type, name: str):
        self.view_class = view_class
        self.name = name
        super().__init__(
            f"'{view_class.__name__}' does not delegate '{name}' to a service"
        )


class CallbackError(LookupError):
    """Raised for an undefined callback group or an unknown callback kind."""
