"""Parse rules for raw environment variable strings.

Each parser takes the raw string and returns the typed value, or raises
``ValueError`` (or an ``ArithmeticError`` from the numeric machinery) when
the string is not a valid representation of the target type. The accessor
decides whether a failure is fatal or replaced by a default.

Rules are deliberately narrower than Python's own constructors:

- ``int()`` and ``float()`` accept digit separators ("1_000"); we do not.
- booleans are the words true/false only, never 1/0 or yes/no.
- ``uuid.UUID()`` strips hyphens anywhere; we accept only the canonical
  plain, hyphenated, braced and parenthesized layouts.
"""

from __future__ import annotations

import math
import re
import struct
import uuid
from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from pydantic import AnyUrl, TypeAdapter

E = TypeVar("E", bound=Enum)

BYTE_RANGE = (0, 2**8 - 1)
INT16_RANGE = (-(2**15), 2**15 - 1)
INT32_RANGE = (-(2**31), 2**31 - 1)
INT64_RANGE = (-(2**63), 2**63 - 1)

_INTEGER = re.compile(r"\s*[+-]?[0-9]+\s*")
_FLOAT = re.compile(
    r"\s*[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|(?i:nan|inf|infinity))\s*"
)
_DECIMAL = re.compile(r"\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)\s*")

_HEX_GUID = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
_GUID = re.compile(
    rf"[0-9a-fA-F]{{32}}|{_HEX_GUID}|\{{{_HEX_GUID}\}}|\({_HEX_GUID}\)"
)

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def parse_bool(raw: str) -> bool:
    token = raw.strip().lower()
    if token == "true":
        return True
    if token == "false":
        return False
    raise ValueError(f"Not a boolean: '{raw}'")


def parse_integer(raw: str, bounds: tuple[int, int]) -> int:
    """Parse a base-10 integer and check it against inclusive ``bounds``."""

    if not _INTEGER.fullmatch(raw):
        raise ValueError(f"Not a base-10 integer: '{raw}'")
    value = int(raw)
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{value} is outside the range {low}..{high}")
    return value


def parse_byte(raw: str) -> int:
    return parse_integer(raw, BYTE_RANGE)


def parse_int16(raw: str) -> int:
    return parse_integer(raw, INT16_RANGE)


def parse_int32(raw: str) -> int:
    return parse_integer(raw, INT32_RANGE)


def parse_int64(raw: str) -> int:
    return parse_integer(raw, INT64_RANGE)


def parse_double(raw: str) -> float:
    """Parse a float. Finite text that overflows to infinity is rejected."""

    if not _FLOAT.fullmatch(raw):
        raise ValueError(f"Not a floating point number: '{raw}'")
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise ValueError(f"{raw.strip()} is outside the double precision range")
    return value


def parse_single(raw: str) -> float:
    """Parse a float and round it to single (binary32) precision.

    Finite values beyond the binary32 range are rejected.
    """

    value = parse_double(raw)
    try:
        result = struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError as e:
        raise ValueError(f"{raw.strip()} is outside the single precision range") from e
    # Some CPython releases pack out-of-range values as infinity instead of raising
    if math.isinf(result) and not math.isinf(value):
        raise ValueError(f"{raw.strip()} is outside the single precision range")
    return result


def parse_decimal(raw: str) -> Decimal:
    if not _DECIMAL.fullmatch(raw):
        raise ValueError(f"Not a decimal number: '{raw}'")
    return Decimal(raw.strip())


def parse_char(raw: str) -> str:
    if len(raw) != 1:
        raise ValueError(f"Expected exactly one character, got {len(raw)}")
    return raw


def parse_uri(raw: str) -> AnyUrl:
    """Parse an absolute URI.

    Raises:
        pydantic.ValidationError: If the string is not a valid absolute URI
            (ValidationError is a ValueError).
    """

    return _URL_ADAPTER.validate_python(raw)


def parse_guid(raw: str) -> uuid.UUID:
    text = raw.strip()
    if not _GUID.fullmatch(text):
        raise ValueError(f"Not a GUID in N, D, B or P layout: '{raw}'")
    return uuid.UUID(re.sub(r"[{}()\-]", "", text))


def parse_enum(raw: str, enum_type: type[E]) -> E:
    """Parse an enum member by exact-case name or by declared integer value.

    Numbers that do not belong to a declared member are rejected, which
    includes composite values of ``Flag`` enums.
    """

    text = raw.strip()
    member = enum_type.__members__.get(text)
    if member is not None:
        return member

    if _INTEGER.fullmatch(text):
        number = int(text)
        for member in enum_type.__members__.values():
            value = member.value
            if isinstance(value, int) and not isinstance(value, bool) and value == number:
                return member

    raise ValueError(f"'{raw}' is not a declared member of {enum_type.__name__}")


# Target type name -> parser. Names follow the accessor's getter names and
# are what UnexpectedVariableTypeError reports as the expected type.
SCALAR_PARSERS: dict[str, Callable[[str], Any]] = {
    "bool": parse_bool,
    "byte": parse_byte,
    "int16": parse_int16,
    "int32": parse_int32,
    "int64": parse_int64,
    "single": parse_single,
    "double": parse_double,
    "decimal": parse_decimal,
    "char": parse_char,
    "uri": parse_uri,
    "guid": parse_guid,
}
