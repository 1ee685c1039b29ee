"""Lifecycle callback host for view classes.

Classes mixing in Callbacks declare callback groups ("save", "create", ...)
and attach before/after hooks to them. run_callbacks() fires a group:
before-hooks, then the wrapped operation, then after-hooks.

Usage:
    class Order(Callbacks):
        def save(self):
            return self.run_callbacks("save", self._write)

    Order.define_model_callbacks("save")
    Order.before("save", lambda order: order.validate())
    Order.after("save", "notify")
"""

import logging
from typing import Any, Callable, Optional, Union

from lackeys.exceptions import CallbackError

logger = logging.getLogger(__name__)

CALLBACK_KINDS = ("before", "after")

Hook = Union[Callable[[Any], Any], str]


class AbortCallbacks(Exception):
    """Raised by a before-hook to halt the callback chain."""


class Callbacks:
    """Mixin giving a class named lifecycle callback chains.

    Chains are stored per class. A subclass starts with a copy of its
    parent's chains, so hooks added to the subclass stay there.
    """

    _callback_chains: dict[str, dict[str, list[Hook]]] = {}

    def __init_subclass__(cls, **kwargs: Any):
        # Copy before other mixins' __init_subclass__ can add hooks
        cls._callback_chains = {
            group: {kind: list(hooks) for kind, hooks in chains.items()}
            for group, chains in cls._callback_chains.items()
        }
        super().__init_subclass__(**kwargs)

    @classmethod
    def define_model_callbacks(cls, *groups: str) -> None:
        """Declare callback groups. Existing groups are left untouched."""
        if cls is Callbacks:
            raise CallbackError("Declare callback groups on a subclass of Callbacks")
        for group in groups:
            cls._callback_chains.setdefault(
                str(group), {kind: [] for kind in CALLBACK_KINDS}
            )

    @classmethod
    def callback_groups(cls) -> tuple[str, ...]:
        """Names of the groups declared on this class."""
        return tuple(cls._callback_chains)

    @classmethod
    def _chain(cls, group: str, kind: str) -> list[Hook]:
        chains = cls._callback_chains.get(str(group))
        if chains is None:
            raise CallbackError(f"{cls.__name__} has no callback group '{group}'")
        if kind not in chains:
            raise CallbackError(
                f"Unknown callback kind '{kind}'; expected one of {CALLBACK_KINDS}"
            )
        return chains[kind]

    @classmethod
    def set_callback(cls, group: str, kind: str, callback: Hook) -> Hook:
        """Append a hook to a group's before or after chain.

        Args:
            group: Declared callback group, e.g. "save"
            kind: "before" or "after"
            callback: Callable taking the instance, or the name of an instance method

        Returns:
            The callback, so this can back a decorator

        Raises:
            CallbackError: If the group or kind is unknown
        """
        cls._chain(group, kind).append(callback)
        return callback

    @classmethod
    def before(cls, group: str, callback: Optional[Hook] = None):
        """Add a before-hook; usable as a decorator when callback is omitted."""
        if callback is None:
            return lambda fn: cls.set_callback(group, "before", fn)
        return cls.set_callback(group, "before", callback)

    @classmethod
    def after(cls, group: str, callback: Optional[Hook] = None):
        """Add an after-hook; usable as a decorator when callback is omitted."""
        if callback is None:
            return lambda fn: cls.set_callback(group, "after", fn)
        return cls.set_callback(group, "after", callback)

    def _run_hook(self, hook: Hook) -> None:
        if isinstance(hook, str):
            getattr(self, hook)()
        else:
            hook(self)

    def run_callbacks(self, group: str, block: Optional[Callable[[], Any]] = None) -> bool:
        """Fire a callback group around an optional operation.

        Args:
            group: Declared callback group
            block: Operation run between the before and after chains

        Returns:
            True if the chain ran to completion, False if a before-hook aborted it

        Raises:
            CallbackError: If the group is not declared
        """
        before_hooks = list(self._chain(group, "before"))
        after_hooks = list(self._chain(group, "after"))

        try:
            for hook in before_hooks:
                self._run_hook(hook)
        except AbortCallbacks:
            logger.debug(f"{type(self).__name__} {group} callbacks aborted")
            return False

        if block is not None:
            block()

        for hook in after_hooks:
            self._run_hook(hook)
        return True
