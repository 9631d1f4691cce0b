"""Exact-format parsing for date/time and duration values.

A format string is compiled once into a fully anchored regular expression
plus the list of fields each capture group feeds. Two token syntaxes are
accepted, and may be mixed:

- custom specifiers written as letter runs: ``yyyyMMdd``, ``HH:mm:ss.fff``,
  ``dd.hh:mm:ss`` (durations), ``tt`` for AM/PM;
- strftime directives: ``%Y-%m-%d %H:%M:%S``.

Every field has a fixed (or explicitly bounded) digit width, so "2022110"
does not match ``yyyyMMdd`` and "09:14:48.5" does not match ``hh:mm:ss``.
Parsing is culture-invariant: month and day names are English.

Literal text can be quoted (``'T'``, ``"at"``) or backslash-escaped
(``hh\\:mm``). Any other character that is not a specifier letter is taken
verbatim.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Literal

from typed_env.errors import InvalidArgumentError

Target = Literal["datetime", "timespan"]

_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_MONTH_ABBRS = tuple(n[:3] for n in _MONTH_NAMES)
# Ordered to match datetime.weekday()
_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_DAY_ABBRS = tuple(n[:3] for n in _DAY_NAMES)

_MAX_FRACTION_DIGITS = 7


def _alternation(names: tuple[str, ...]) -> str:
    return "(?i:" + "|".join(names) + ")"


@dataclass(frozen=True)
class _Field:
    kind: str
    pattern: str


# Custom specifier letters. Reserved letters have a meaning in the custom
# format language that we do not implement, so they are rejected rather than
# silently matched as literals.
_DATETIME_LETTERS = frozenset("yMdHhmsft")
_TIMESPAN_LETTERS = frozenset("dhHmsf")
_RESERVED_LETTERS = frozenset("yMdHhmsftzKgF")

_DATETIME_DIRECTIVES: dict[str, _Field] = {
    "Y": _Field("year4", r"\d{4}"),
    "y": _Field("year2", r"\d{2}"),
    "m": _Field("month", r"\d{2}"),
    "d": _Field("day", r"\d{2}"),
    "H": _Field("hour24", r"\d{2}"),
    "I": _Field("hour12", r"\d{2}"),
    "M": _Field("minute", r"\d{2}"),
    "S": _Field("second", r"\d{2}"),
    "f": _Field("fraction", r"\d{6}"),
    "p": _Field("ampm", r"(?i:AM|PM)"),
    "b": _Field("month_name", _alternation(_MONTH_ABBRS)),
    "B": _Field("month_name", _alternation(_MONTH_NAMES)),
    "a": _Field("day_name", _alternation(_DAY_ABBRS)),
    "A": _Field("day_name", _alternation(_DAY_NAMES)),
    "j": _Field("yday", r"\d{3}"),
}

_TIMESPAN_DIRECTIVES: dict[str, _Field] = {
    "d": _Field("days", r"\d+"),
    "H": _Field("hours", r"\d{2}"),
    "M": _Field("minutes", r"\d{2}"),
    "S": _Field("seconds", r"\d{2}"),
    "f": _Field("fraction", r"\d{6}"),
}


def _digits(count: int) -> str:
    return r"\d{1,2}" if count == 1 else r"\d{2}"


def _datetime_specifier(letter: str, count: int) -> _Field | None:
    if letter == "y":
        if count <= 2:
            return _Field("short_year", _digits(count))
        return _Field("year4", rf"\d{{{max(count, 4)}}}")
    if letter == "M":
        if count <= 2:
            return _Field("month", _digits(count))
        if count == 3:
            return _Field("month_name", _alternation(_MONTH_ABBRS))
        return _Field("month_name", _alternation(_MONTH_NAMES))
    if letter == "d":
        if count <= 2:
            return _Field("day", _digits(count))
        if count == 3:
            return _Field("day_name", _alternation(_DAY_ABBRS))
        return _Field("day_name", _alternation(_DAY_NAMES))
    if letter == "H" and count <= 2:
        return _Field("hour24", _digits(count))
    if letter == "h" and count <= 2:
        return _Field("hour12", _digits(count))
    if letter == "m" and count <= 2:
        return _Field("minute", _digits(count))
    if letter == "s" and count <= 2:
        return _Field("second", _digits(count))
    if letter == "f" and count <= _MAX_FRACTION_DIGITS:
        return _Field("fraction", rf"\d{{{count}}}")
    if letter == "t" and count <= 2:
        return _Field("ampm", "(?i:[AP])" if count == 1 else "(?i:AM|PM)")
    return None


def _timespan_specifier(letter: str, count: int) -> _Field | None:
    if letter == "d" and count <= 8:
        return _Field("days", rf"\d{{{count},}}")
    if letter in "hH" and count <= 2:
        return _Field("hours", _digits(count))
    if letter == "m" and count <= 2:
        return _Field("minutes", _digits(count))
    if letter == "s" and count <= 2:
        return _Field("seconds", _digits(count))
    if letter == "f" and count <= _MAX_FRACTION_DIGITS:
        return _Field("fraction", rf"\d{{{count}}}")
    return None


@dataclass(frozen=True)
class ExactFormat:
    """A compiled exact-match format."""

    fmt: str
    target: Target
    regex: re.Pattern[str]
    kinds: tuple[str, ...]

    def match(self, value: str) -> dict[str, str]:
        """Match ``value`` against the format and return captured fields.

        Raises:
            ValueError: If the value does not match, or a field captured more
                than once has conflicting values.
        """

        m = self.regex.fullmatch(value)
        if m is None:
            raise ValueError(f"'{value}' does not match format '{self.fmt}'")

        captured: dict[str, str] = {}
        for index, kind in enumerate(self.kinds, start=1):
            text = m.group(index)
            previous = captured.setdefault(kind, text)
            if _normalize(kind, previous) != _normalize(kind, text):
                raise ValueError(f"'{value}' has conflicting values for {kind}")
        return captured

    def parse_datetime(self, value: str) -> datetime:
        fields = self.match(value)

        year, month, day = 1900, 1, 1
        if "year4" in fields:
            year = int(fields["year4"])
        elif "year2" in fields:
            # strftime %y: POSIX pivot
            yy = int(fields["year2"])
            year = 2000 + yy if yy < 69 else 1900 + yy
        elif "short_year" in fields:
            # Custom y/yy: two-digit year window ends at 2049
            yy = int(fields["short_year"])
            year = 2000 + yy if yy < 50 else 1900 + yy
        if "month" in fields:
            month = int(fields["month"])
        elif "month_name" in fields:
            month = _name_index(fields["month_name"], _MONTH_NAMES) + 1
        if "day" in fields:
            day = int(fields["day"])

        hour = 0
        ampm = fields.get("ampm", "").upper()[:1]
        if "hour12" in fields:
            hour12 = int(fields["hour12"])
            if not 1 <= hour12 <= 12:
                raise ValueError(f"'{value}' has a 12-hour clock hour out of range")
            hour = hour12 % 12 + (12 if ampm == "P" else 0)
        if "hour24" in fields:
            hour24 = int(fields["hour24"])
            if "hour12" in fields and hour24 % 12 != hour % 12:
                raise ValueError(f"'{value}' has a 24-hour clock hour that contradicts its 12-hour one")
            if ampm and (hour24 >= 12) != (ampm == "P"):
                raise ValueError(f"'{value}' has an hour that contradicts {fields['ampm']}")
            hour = hour24

        result = datetime(
            year,
            month,
            day,
            hour,
            int(fields.get("minute", 0)),
            int(fields.get("second", 0)),
            _microseconds(fields.get("fraction")),
        )

        if "yday" in fields:
            yday = int(fields["yday"])
            if not 1 <= yday <= 366:
                raise ValueError(f"'{value}' has a day of year out of range")
            by_yday = datetime(year, 1, 1) + timedelta(days=yday - 1)
            if by_yday.year != year:
                raise ValueError(f"'{value}' has a day of year out of range")
            if ("month" in fields or "month_name" in fields or "day" in fields) and (
                by_yday.month,
                by_yday.day,
            ) != (result.month, result.day):
                raise ValueError(f"'{value}' has a day of year that contradicts its date")
            result = result.replace(month=by_yday.month, day=by_yday.day)

        if "day_name" in fields:
            weekday = _name_index(fields["day_name"], _DAY_NAMES)
            if weekday != result.weekday():
                raise ValueError(f"'{value}' has a day name that contradicts its date")

        return result

    def parse_timespan(self, value: str) -> timedelta:
        fields = self.match(value)

        hours = int(fields.get("hours", 0))
        minutes = int(fields.get("minutes", 0))
        seconds = int(fields.get("seconds", 0))
        if hours > 23 or minutes > 59 or seconds > 59:
            raise ValueError(f"'{value}' has a time component out of range")

        return timedelta(
            days=int(fields.get("days", 0)),
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            microseconds=_microseconds(fields.get("fraction")),
        )


def _name_index(text: str, names: tuple[str, ...]) -> int:
    lowered = text.lower()
    for index, name in enumerate(names):
        if lowered in (name.lower(), name[:3].lower()):
            return index
    raise ValueError(f"Unknown name: {text}")


def _normalize(kind: str, text: str) -> int | str:
    """Reduce a captured field to the value it denotes, so "5" and "05" agree."""

    if kind == "fraction":
        return _microseconds(text)
    if kind == "month_name":
        return _name_index(text, _MONTH_NAMES)
    if kind == "day_name":
        return _name_index(text, _DAY_NAMES)
    if kind == "ampm":
        return text.upper()[:1]
    return int(text)


def _microseconds(fraction: str | None) -> int:
    if not fraction:
        return 0
    # Digits beyond microsecond precision are truncated
    return int(fraction[:6].ljust(6, "0"))


@lru_cache(maxsize=128)
def compile_format(fmt: str, target: Target) -> ExactFormat:
    """Compile ``fmt`` for parsing a ``target`` value.

    Args:
        fmt: Custom-specifier and/or strftime-style format string.
        target: "datetime" or "timespan".

    Returns:
        The compiled format.

    Raises:
        InvalidArgumentError: If the format is empty, malformed, or uses a
            token that has no meaning for ``target``.
    """

    if not fmt:
        raise InvalidArgumentError("Format was null or empty.")

    letters = _DATETIME_LETTERS if target == "datetime" else _TIMESPAN_LETTERS
    specifier = _datetime_specifier if target == "datetime" else _timespan_specifier
    directives = _DATETIME_DIRECTIVES if target == "datetime" else _TIMESPAN_DIRECTIVES

    parts: list[str] = []
    kinds: list[str] = []

    def add_field(field: _Field | None, token: str) -> None:
        if field is None:
            raise InvalidArgumentError(f"Unsupported {target} format token '{token}' in '{fmt}'")
        parts.append(f"({field.pattern})")
        kinds.append(field.kind)

    i = 0
    while i < len(fmt):
        ch = fmt[i]
        if ch == "%":
            if i + 1 >= len(fmt):
                raise InvalidArgumentError(f"Dangling '%' in format '{fmt}'")
            code = fmt[i + 1]
            if code == "%":
                parts.append("%")
            else:
                add_field(directives.get(code), "%" + code)
            i += 2
        elif ch in ("'", '"'):
            end = fmt.find(ch, i + 1)
            if end == -1:
                raise InvalidArgumentError(f"Unterminated quote in format '{fmt}'")
            parts.append(re.escape(fmt[i + 1 : end]))
            i = end + 1
        elif ch == "\\":
            if i + 1 >= len(fmt):
                raise InvalidArgumentError(f"Dangling escape in format '{fmt}'")
            parts.append(re.escape(fmt[i + 1]))
            i += 2
        elif ch in letters or ch in _RESERVED_LETTERS:
            run = i
            while run < len(fmt) and fmt[run] == ch:
                run += 1
            token = fmt[i:run]
            add_field(specifier(ch, len(token)) if ch in letters else None, token)
            i = run
        else:
            parts.append(re.escape(ch))
            i += 1

    if not kinds:
        raise InvalidArgumentError(f"Format '{fmt}' has no {target} fields")

    return ExactFormat(fmt, target, re.compile("".join(parts), re.ASCII), tuple(kinds))
