"""Unit tests for the registration table.

Tests the table's contract:
- Building registrations through the builder
- Exact-class lookup
- Overwrite on re-registration
- Teardown and freeze
"""

import logging

import pytest

from lackeys import (
    Registration,
    RegistrationBuilder,
    RegistrationError,
    clear_registry,
    freeze_registry,
    get_all_registrations,
    is_frozen,
    lookup,
    register,
    unregister,
)


class View:
    pass


class SubView(View):
    pass


class FirstService:
    pass


class SecondService:
    pass


class TestRegistrationBuilder:
    """Tests for RegistrationBuilder."""

    def test_add_method(self):
        registration = Registration(service_class=FirstService, view_class=View)
        RegistrationBuilder(registration).add_method("called")

        assert registration.method_names == {"called"}
        assert registration.has_method("called")
        assert not registration.has_method("other")

    def test_chaining(self):
        registration = Registration(service_class=FirstService, view_class=View)
        builder = RegistrationBuilder(registration)

        assert builder.add_method("a").add_callback("before_save", "b") is builder

    def test_callback_overwrites(self):
        registration = Registration(service_class=FirstService, view_class=View)
        builder = RegistrationBuilder(registration)
        builder.add_callback("before_save", "first")
        builder.add_callback("before_save", "second")

        assert registration.callback_for("before_save") == "second"

    def test_events_share_method(self):
        registration = Registration(service_class=FirstService, view_class=View)
        RegistrationBuilder(registration) \
            .add_callback("before_save", "audit") \
            .add_callback("after_create", "audit")

        assert registration.callback_map == {"before_save": "audit", "after_create": "audit"}

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_names_rejected(self, name):
        builder = RegistrationBuilder(Registration(service_class=FirstService, view_class=View))

        with pytest.raises(RegistrationError):
            builder.add_method(name)
        with pytest.raises(RegistrationError):
            builder.add_callback(name, "method")

    def test_names_are_stringified(self):
        registration = Registration(service_class=FirstService, view_class=View)
        RegistrationBuilder(registration).add_method(" called ")

        assert registration.has_method("called")


class TestRegisterAndLookup:
    """Tests for register() and lookup()."""

    def test_register_stores_registration(self):
        registration = register(FirstService, View, lambda r: r.add_method("called"))

        assert lookup(View) is registration
        assert registration.service_class is FirstService
        assert registration.view_class is View

    def test_register_without_configure(self):
        registration = register(FirstService, View)

        assert registration.method_names == set()
        assert registration.callback_map == {}

    def test_lookup_unregistered_returns_none(self):
        assert lookup(View) is None

    def test_lookup_is_exact_class(self):
        register(FirstService, View, lambda r: r.add_method("called"))

        assert lookup(SubView) is None

    def test_reregister_overwrites_without_merge(self):
        register(FirstService, View, lambda r: r.add_method("first_only"))
        register(SecondService, View, lambda r: r.add_method("second_only"))

        registration = lookup(View)
        assert registration.service_class is SecondService
        assert registration.method_names == {"second_only"}

    def test_reregister_logs_warning(self, caplog):
        register(FirstService, View)

        with caplog.at_level(logging.WARNING, logger="lackeys.registration"):
            register(SecondService, View)

        assert "Replacing registration for View" in caplog.text

    def test_reregister_warning_can_be_disabled(self, caplog, monkeypatch):
        monkeypatch.setenv("LACKEYS_WARN_ON_REREGISTER", "false")
        register(FirstService, View)

        with caplog.at_level(logging.WARNING, logger="lackeys.registration"):
            register(SecondService, View)

        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_failed_configure_leaves_table_untouched(self):
        register(FirstService, View, lambda r: r.add_method("kept"))

        with pytest.raises(RegistrationError):
            register(SecondService, View, lambda r: r.add_method(""))

        assert lookup(View).service_class is FirstService


class TestTableManagement:
    """Tests for unregister, snapshots, freezing and clearing."""

    def test_unregister(self):
        registration = register(FirstService, View)

        assert unregister(View) is registration
        assert lookup(View) is None
        assert unregister(View) is None

    def test_get_all_registrations_is_a_snapshot(self):
        register(FirstService, View)
        snapshot = get_all_registrations()
        snapshot.clear()

        assert View in get_all_registrations()

    def test_freeze_rejects_writes(self):
        register(FirstService, View)
        freeze_registry()

        assert is_frozen()
        with pytest.raises(RegistrationError, match="frozen"):
            register(SecondService, View)
        with pytest.raises(RegistrationError, match="frozen"):
            unregister(View)
        assert lookup(View).service_class is FirstService

    def test_clear_unfreezes(self):
        register(FirstService, View)
        freeze_registry()
        clear_registry()

        assert not is_frozen()
        assert lookup(View) is None
        register(FirstService, View)
