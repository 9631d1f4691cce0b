"""Typed access to process, user and machine environment variables."""

from typed_env.accessor import EnvironmentVariableAccessor
from typed_env.config import TypedEnvSettings, get_settings
from typed_env.enums import Scope
from typed_env.errors import (
    InvalidArgumentError,
    TypedEnvError,
    UnexpectedVariableTypeError,
    VariableNotFoundError,
)
from typed_env.stores import (
    DetachedEnvironmentStore,
    EnvironmentStore,
    MappingEnvironmentStore,
    ProcessEnvironmentStore,
    RegistryEnvironmentStore,
    store_for_scope,
)

__all__ = [
    "DetachedEnvironmentStore",
    "EnvironmentStore",
    "EnvironmentVariableAccessor",
    "InvalidArgumentError",
    "MappingEnvironmentStore",
    "ProcessEnvironmentStore",
    "RegistryEnvironmentStore",
    "Scope",
    "TypedEnvError",
    "TypedEnvSettings",
    "UnexpectedVariableTypeError",
    "VariableNotFoundError",
    "get_settings",
    "store_for_scope",
]
