"""Environment variable stores.

A store is the only place that touches an environment-variable table. Each
store is bound to one scope and exposes two calls:

- ``get(name)`` returns the raw string, or None when the variable is absent.
- ``set(name, value)`` writes the raw string; ``set(name, None)`` deletes.

Keeping env mutation behind this seam lets the accessor stay a pure
parse/coerce layer, and lets tests swap in a plain dict.

Note: user and machine tables only exist on Windows (registry-backed). On
other platforms those scopes get a DetachedEnvironmentStore, which reads as
empty and ignores writes.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Protocol

from typed_env.config import TypedEnvSettings, get_settings
from typed_env.enums import Scope

if sys.platform == "win32":
    import winreg

logger = logging.getLogger(__name__)


class EnvironmentStore(Protocol):
    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str | None) -> None: ...


class MappingEnvironmentStore:
    """Store backed by any mutable str -> str mapping."""

    def __init__(self, mapping: MutableMapping[str, str] | None = None) -> None:
        self._mapping: MutableMapping[str, str] = {} if mapping is None else mapping

    def get(self, name: str) -> str | None:
        return self._mapping.get(name)

    def set(self, name: str, value: str | None) -> None:
        if value is None:
            self._mapping.pop(name, None)
            logger.debug("Deleted environment variable %s", name)
        else:
            self._mapping[name] = value
            logger.debug("Set environment variable %s", name)


class ProcessEnvironmentStore(MappingEnvironmentStore):
    """Store for the current process environment (os.environ)."""

    def __init__(self) -> None:
        super().__init__(os.environ)


class DetachedEnvironmentStore:
    """Store for a scope the host platform does not persist.

    Reads always return None and writes are dropped.
    """

    def __init__(self, scope: Scope) -> None:
        self.scope = scope

    def get(self, name: str) -> str | None:
        return None

    def set(self, name: str, value: str | None) -> None:
        logger.debug(
            "Ignoring write to %s-scope variable %s: scope not supported on %s",
            self.scope,
            name,
            sys.platform,
        )


class RegistryEnvironmentStore:
    """Store for the Windows user or machine environment tables.

    Values are read and written as REG_SZ strings under
    ``HKEY_CURRENT_USER\\Environment`` (user) or the Session Manager
    environment key under ``HKEY_LOCAL_MACHINE`` (machine). Machine-scope
    writes normally require an elevated process.
    """

    def __init__(self, scope: Scope, settings: TypedEnvSettings) -> None:
        if sys.platform != "win32":
            raise OSError("Registry-backed environment stores require Windows")
        if scope == Scope.USER:
            self._root = winreg.HKEY_CURRENT_USER
            self._subkey = settings.user_registry_key
        elif scope == Scope.MACHINE:
            self._root = winreg.HKEY_LOCAL_MACHINE
            self._subkey = settings.machine_registry_key
        else:
            raise ValueError(f"No registry table for scope: {scope}")
        self.scope = scope

    def get(self, name: str) -> str | None:
        try:
            with winreg.OpenKey(self._root, self._subkey, 0, winreg.KEY_READ) as key:
                value, _kind = winreg.QueryValueEx(key, name)
        except FileNotFoundError:
            return None
        return str(value)

    def set(self, name: str, value: str | None) -> None:
        with winreg.OpenKey(
            self._root, self._subkey, 0, winreg.KEY_SET_VALUE
        ) as key:
            if value is None:
                try:
                    winreg.DeleteValue(key, name)
                except FileNotFoundError:
                    return
                logger.debug("Deleted %s-scope environment variable %s", self.scope, name)
            else:
                winreg.SetValueEx(key, name, 0, winreg.REG_SZ, value)
                logger.debug("Set %s-scope environment variable %s", self.scope, name)


def store_for_scope(
    scope: Scope, settings: TypedEnvSettings | None = None
) -> EnvironmentStore:
    """Return the store backing ``scope`` on this platform."""

    if scope == Scope.PROCESS:
        return ProcessEnvironmentStore()
    if sys.platform == "win32":
        return RegistryEnvironmentStore(scope, settings or get_settings())
    return DetachedEnvironmentStore(scope)
