"""Unit tests for environment variable stores."""

import logging
import os
import sys

import pytest

from typed_env.config import TypedEnvSettings
from typed_env.enums import Scope
from typed_env.stores import (
    DetachedEnvironmentStore,
    MappingEnvironmentStore,
    ProcessEnvironmentStore,
    RegistryEnvironmentStore,
    store_for_scope,
)

not_windows = pytest.mark.skipif(sys.platform == "win32", reason="non-Windows behaviour")


class TestMappingEnvironmentStore:
    """Tests for the in-memory store."""

    def test_get_missing_returns_none(self):
        """An absent name should read as None."""
        assert MappingEnvironmentStore().get("MISSING") is None

    def test_set_and_get(self):
        """A written value should read back."""
        store = MappingEnvironmentStore()
        store.set("HOME", "/root")
        assert store.get("HOME") == "/root"

    def test_set_none_deletes(self):
        """Writing None should remove the key."""
        backing = {"X": "1"}
        store = MappingEnvironmentStore(backing)
        store.set("X", None)
        assert "X" not in backing

    def test_delete_missing_is_noop(self):
        """Deleting an absent name should not raise."""
        store = MappingEnvironmentStore()
        store.set("NOPE", None)
        assert store.get("NOPE") is None

    def test_wraps_given_mapping(self):
        """Writes should go to the mapping passed in."""
        backing: dict[str, str] = {}
        MappingEnvironmentStore(backing).set("A", "1")
        assert backing == {"A": "1"}

    def test_writes_log_name_not_value(self, caplog):
        """Logs should name the variable but never include its value."""
        caplog.set_level(logging.DEBUG, logger="typed_env.stores")
        MappingEnvironmentStore().set("API_TOKEN", "s3cret")
        assert "API_TOKEN" in caplog.text
        assert "s3cret" not in caplog.text


class TestProcessEnvironmentStore:
    """Tests for the os.environ store."""

    def test_reads_and_writes_os_environ(self, process_var):
        """Reads, writes and deletes should go through os.environ."""
        store = ProcessEnvironmentStore()
        store.set(process_var, "value")
        assert os.environ[process_var] == "value"
        assert store.get(process_var) == "value"

        store.set(process_var, None)
        assert process_var not in os.environ


class TestDetachedEnvironmentStore:
    """Tests for the store used where a scope has no backing table."""

    def test_reads_as_empty(self):
        """Every read should be absent."""
        assert DetachedEnvironmentStore(Scope.USER).get("PATH") is None

    def test_writes_are_ignored_and_logged(self, caplog):
        """Writes should be dropped with a DEBUG record."""
        caplog.set_level(logging.DEBUG, logger="typed_env.stores")
        store = DetachedEnvironmentStore(Scope.MACHINE)
        store.set("X", "1")
        assert store.get("X") is None
        assert "Ignoring write to machine-scope variable X" in caplog.text


class TestStoreForScope:
    """Tests for choosing the platform store of a scope."""

    def test_process_scope(self):
        """The process scope should use os.environ."""
        assert isinstance(store_for_scope(Scope.PROCESS), ProcessEnvironmentStore)

    def test_process_scope_ignores_invalid_settings(self, monkeypatch):
        """Settings should not be loaded for the process scope."""
        monkeypatch.setenv("TYPED_ENV_DEFAULT_SCOPE", "galaxy")
        assert isinstance(store_for_scope(Scope.PROCESS), ProcessEnvironmentStore)

    @not_windows
    @pytest.mark.parametrize("scope", [Scope.USER, Scope.MACHINE])
    def test_user_and_machine_detached_off_windows(self, scope):
        """User and machine scopes should be detached off Windows."""
        store = store_for_scope(scope)
        assert isinstance(store, DetachedEnvironmentStore)
        assert store.scope == scope

    @not_windows
    def test_registry_store_requires_windows(self):
        """The registry store should refuse to open off Windows."""
        with pytest.raises(OSError):
            RegistryEnvironmentStore(Scope.USER, TypedEnvSettings())
