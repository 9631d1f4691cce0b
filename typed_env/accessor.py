"""Typed, scope-aware access to environment variables.

EnvironmentVariableAccessor reads variables as typed values instead of raw
strings. Every getter comes in two flavours:

- strict (``get_int32``): raises VariableNotFoundError when the variable is
  absent and UnexpectedVariableTypeError when it does not parse;
- lenient (``get_int32_or_default``): returns the caller's default in both
  of those cases.

Name and format validation (InvalidArgumentError) is never absorbed.

The accessor holds no state besides its scope and the store bound to it;
every call goes straight to the store, so reads always see the current
value.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar
from uuid import UUID

from pydantic import AnyUrl

from typed_env import parsers
from typed_env.config import TypedEnvSettings, get_settings
from typed_env.enums import Scope
from typed_env.errors import (
    InvalidArgumentError,
    UnexpectedVariableTypeError,
    VariableNotFoundError,
)
from typed_env.formats import ExactFormat, Target, compile_format
from typed_env.stores import EnvironmentStore, store_for_scope

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

# Parser failures: ValueError covers malformed text (pydantic's
# ValidationError included); ArithmeticError covers overflow while building
# the value.
_PARSE_ERRORS = (ValueError, ArithmeticError)


def _validate_name(name: str | None) -> str:
    if not name:
        raise InvalidArgumentError("Name was null or empty.")
    return name


def _compile(fmt: str | None, target: Target) -> ExactFormat:
    if not fmt:
        raise InvalidArgumentError("Format was null or empty.")
    return compile_format(fmt, target)


class EnvironmentVariableAccessor:
    """Typed get/set/delete/exists over one environment-variable scope."""

    def __init__(
        self,
        scope: Scope | None = None,
        *,
        store: EnvironmentStore | None = None,
        settings: TypedEnvSettings | None = None,
    ) -> None:
        """Initialize the accessor.

        Args:
            scope: Table to operate on. Defaults to ``settings.default_scope``
                (Scope.PROCESS unless TYPED_ENV_DEFAULT_SCOPE says otherwise).
            store: Explicit store to use instead of the platform store for
                ``scope``.
            settings: Library settings. Loaded from the environment if omitted.
        """
        if scope is None:
            settings = settings or get_settings()
            scope = settings.default_scope
        self._scope = Scope(scope)
        self._store = store if store is not None else store_for_scope(self._scope, settings)

    @property
    def scope(self) -> Scope:
        return self._scope

    def __repr__(self) -> str:
        return f"{type(self).__name__}(scope={self._scope!r})"

    # -- existence and mutation ------------------------------------------------

    def exists(self, name: str) -> bool:
        """Return True if the variable has a value in this scope."""
        return self.get_string_or_default(name) is not None

    def set(self, name: str, value: Any) -> None:
        """Write ``str(value)`` to the variable; ``None`` deletes it.

        Enum members are written by name so they read back with get_enum.
        """
        _validate_name(name)
        if value is None:
            raw = None
        elif isinstance(value, Enum):
            raw = value.name
        else:
            raw = str(value)
        self._store.set(name, raw)

    def delete(self, name: str) -> None:
        """Delete the variable. Does nothing if it does not exist."""
        _validate_name(name)
        self._store.set(name, None)

    def delete_or_throw(self, name: str) -> None:
        """Delete the variable.

        Raises:
            VariableNotFoundError: If the variable does not exist.
        """
        if not self.exists(name):
            raise VariableNotFoundError(name)
        self._store.set(name, None)

    # -- strings ---------------------------------------------------------------

    def get_string(self, name: str) -> str:
        """Return the raw value.

        Raises:
            InvalidArgumentError: If name is null or empty.
            VariableNotFoundError: If the variable does not exist.
        """
        value = self._store.get(_validate_name(name))
        if value is None:
            raise VariableNotFoundError(name)
        return value

    def get_string_or_default(self, name: str, default: str | None = None) -> str | None:
        value = self._store.get(_validate_name(name))
        return default if value is None else value

    # -- parse plumbing --------------------------------------------------------

    def _get_parsed(self, name: str, parse: Callable[[str], T], type_name: str) -> T:
        value = self.get_string(name)
        try:
            return parse(value)
        except _PARSE_ERRORS as e:
            raise UnexpectedVariableTypeError(name, value, type_name) from e

    def _get_parsed_or_default(self, name: str, parse: Callable[[str], T], default: T) -> T:
        value = self.get_string_or_default(name)
        if value is None:
            return default
        try:
            return parse(value)
        except _PARSE_ERRORS:
            return default

    def _get_scalar(self, name: str, type_name: str) -> Any:
        return self._get_parsed(name, parsers.SCALAR_PARSERS[type_name], type_name)

    def _get_scalar_or_default(self, name: str, type_name: str, default: Any) -> Any:
        return self._get_parsed_or_default(name, parsers.SCALAR_PARSERS[type_name], default)

    # -- scalars ---------------------------------------------------------------

    def get_bool(self, name: str) -> bool:
        """Return the variable as a bool ("true"/"false", any case)."""
        return self._get_scalar(name, "bool")

    def get_bool_or_default(self, name: str, default: bool = False) -> bool:
        return self._get_scalar_or_default(name, "bool", default)

    def get_byte(self, name: str) -> int:
        """Return the variable as an unsigned 8-bit integer."""
        return self._get_scalar(name, "byte")

    def get_byte_or_default(self, name: str, default: int = 0) -> int:
        return self._get_scalar_or_default(name, "byte", default)

    def get_int16(self, name: str) -> int:
        return self._get_scalar(name, "int16")

    def get_int16_or_default(self, name: str, default: int = 0) -> int:
        return self._get_scalar_or_default(name, "int16", default)

    def get_int32(self, name: str) -> int:
        return self._get_scalar(name, "int32")

    def get_int32_or_default(self, name: str, default: int = 0) -> int:
        return self._get_scalar_or_default(name, "int32", default)

    def get_int64(self, name: str) -> int:
        return self._get_scalar(name, "int64")

    def get_int64_or_default(self, name: str, default: int = 0) -> int:
        return self._get_scalar_or_default(name, "int64", default)

    def get_single(self, name: str) -> float:
        """Return the variable as a float rounded to single precision."""
        return self._get_scalar(name, "single")

    def get_single_or_default(self, name: str, default: float = 0.0) -> float:
        return self._get_scalar_or_default(name, "single", default)

    def get_double(self, name: str) -> float:
        return self._get_scalar(name, "double")

    def get_double_or_default(self, name: str, default: float = 0.0) -> float:
        return self._get_scalar_or_default(name, "double", default)

    def get_decimal(self, name: str) -> Decimal:
        return self._get_scalar(name, "decimal")

    def get_decimal_or_default(self, name: str, default: Decimal = Decimal(0)) -> Decimal:
        return self._get_scalar_or_default(name, "decimal", default)

    def get_char(self, name: str) -> str:
        """Return the variable as a single character."""
        return self._get_scalar(name, "char")

    def get_char_or_default(self, name: str, default: str = "\0") -> str:
        return self._get_scalar_or_default(name, "char", default)

    def get_uri(self, name: str) -> AnyUrl:
        """Return the variable as an absolute URI.

        The pydantic ValidationError is chained as the cause on failure.
        """
        return self._get_scalar(name, "uri")

    def get_uri_or_default(self, name: str, default: AnyUrl | None = None) -> AnyUrl | None:
        return self._get_scalar_or_default(name, "uri", default)

    def get_guid(self, name: str) -> UUID:
        """Return the variable as a UUID.

        Accepts 32 hex digits, optionally hyphenated and optionally wrapped in
        braces or parentheses, in any case.
        """
        return self._get_scalar(name, "guid")

    def get_guid_or_default(self, name: str, default: UUID | None = None) -> UUID | None:
        return self._get_scalar_or_default(name, "guid", default)

    # -- enums -----------------------------------------------------------------

    def get_enum(self, name: str, enum_type: type[E]) -> E:
        """Return the member of ``enum_type`` named by the variable.

        The value may be the exact-case member name or the integer value of a
        declared member.
        """
        return self._get_parsed(
            name, lambda raw: parsers.parse_enum(raw, enum_type), enum_type.__name__
        )

    def get_enum_or_default(self, name: str, enum_type: type[E], default: E) -> E:
        if not self.exists(name):
            return default
        return self._get_parsed_or_default(
            name, lambda raw: parsers.parse_enum(raw, enum_type), default
        )

    # -- dates and durations ---------------------------------------------------

    def get_datetime(self, name: str, fmt: str) -> datetime:
        """Return the variable parsed with the exact format ``fmt``.

        Args:
            name: Variable name.
            fmt: Format such as "yyyyMMdd" or "%Y-%m-%dT%H:%M:%S".

        Raises:
            InvalidArgumentError: If name or fmt is null or empty, or fmt is
                not a valid date/time format.
            VariableNotFoundError: If the variable does not exist.
            UnexpectedVariableTypeError: If the value does not match fmt.
        """
        _validate_name(name)
        compiled = _compile(fmt, "datetime")
        return self._get_parsed(name, compiled.parse_datetime, "datetime")

    def get_datetime_or_default(self, name: str, fmt: str, default: datetime) -> datetime:
        _validate_name(name)
        compiled = _compile(fmt, "datetime")
        return self._get_parsed_or_default(name, compiled.parse_datetime, default)

    def get_timespan(self, name: str, fmt: str) -> timedelta:
        """Return the variable parsed as a duration with the exact format ``fmt``.

        Args:
            name: Variable name.
            fmt: Format such as "hh:mm:ss" or "d.hh:mm:ss.fff".
        """
        _validate_name(name)
        compiled = _compile(fmt, "timespan")
        return self._get_parsed(name, compiled.parse_timespan, "timedelta")

    def get_timespan_or_default(self, name: str, fmt: str, default: timedelta) -> timedelta:
        _validate_name(name)
        compiled = _compile(fmt, "timespan")
        return self._get_parsed_or_default(name, compiled.parse_timespan, default)
