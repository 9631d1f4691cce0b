"""StrEnum definitions for type-safe constants."""

from enum import StrEnum


class Scope(StrEnum):
    """Environment-variable table an accessor operates on."""

    PROCESS = "process"
    USER = "user"
    MACHINE = "machine"
