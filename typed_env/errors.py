"""Error taxonomy for typed environment variable access.

Every public accessor operation either succeeds or raises exactly one of:

- InvalidArgumentError: the caller passed a null/empty name or format.
- VariableNotFoundError: the variable is absent where it is required.
- UnexpectedVariableTypeError: the variable is present but its raw string
  does not parse as the requested type.

Lenient (``*_or_default``) getters absorb the last two and return the
caller's default instead. InvalidArgumentError always propagates.
"""

from __future__ import annotations


class TypedEnvError(Exception):
    """Base class for all typed environment variable errors."""

    pass


class InvalidArgumentError(TypedEnvError, ValueError):
    """Raised when a variable name or format argument is null or empty."""

    pass


class VariableNotFoundError(TypedEnvError, LookupError):
    """Raised when an environment variable does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Environment variable: '{name}' does not exist.")
        self.name = name


class UnexpectedVariableTypeError(TypedEnvError, ValueError):
    """Raised when an environment variable's value is not of the expected type.

    Attributes:
        name: Variable name.
        value: Raw string value read from the store.
        expected_type: Name of the type the value was parsed as.
    """

    def __init__(self, name: str, value: str, expected_type: type | str) -> None:
        type_name = expected_type if isinstance(expected_type, str) else expected_type.__name__
        super().__init__(
            f"Environment variable: '{name}' value: '{value}' "
            f"is not of expected type: {type_name}."
        )
        self.name = name
        self.value = value
        self.expected_type = type_name
