"""Bit fields of the 64-bit PE configuration word."""

from __future__ import annotations

from enum import Enum

__all__ = [
    "ConfigField",
    "get_field",
    "set_field",
    "get_bool_field",
    "set_bool_field",
]

_WORD_MASK = (1 << 64) - 1


class ConfigField(Enum):
    """A field of the configuration word; the value is its ``(start, end)`` bit range."""

    PREDICATE_BIT = (63, 64)
    MSB_BIT = (62, 63)
    USE_FLOAT_BIT = (61, 62)
    ALU_BYPASS_BIT = (60, 61)
    DISABLE_PE_RF_BIT = (59, 60)
    IMMEDIATE = (35, 51)
    LOOP_END = (40, 45)
    LOOP_START = (35, 40)
    OP_CODE = (30, 35)
    ROUTER_WRITE_ENABLE = (26, 30)
    ALU_UPDATE_RES_BIT = (25, 26)
    ROUTER_BYPASS = (21, 25)
    ROUTER_SWITCH_CONFIG = (0, 21)

    def bit_range(self) -> tuple[int, int]:
        """Return ``(start, end)``: start inclusive, end exclusive."""
        start, end = self.value
        return start, end

    @property
    def width(self) -> int:
        start, end = self.value
        return end - start


def get_field(code: int, field: ConfigField) -> int:
    """Extract ``field`` from the configuration word ``code``."""
    start, _ = field.bit_range()
    return (code >> start) & ((1 << field.width) - 1)


def set_field(code: int, field: ConfigField, value: int) -> int:
    """Return ``code`` with ``field`` replaced by ``value``."""
    start, _ = field.bit_range()
    if value < 0 or value >= (1 << field.width):
        raise ValueError(
            f"Value {value} too large for field {field.name} of width {field.width}"
        )
    mask = (1 << field.width) - 1
    return ((code & ~(mask << start)) | ((value & mask) << start)) & _WORD_MASK


def _require_single_bit(field: ConfigField) -> None:
    if field.width != 1:
        raise ValueError(f"Field {field.name} is not a single bit")


def get_bool_field(code: int, field: ConfigField) -> bool:
    """Read a single-bit field as a bool."""
    _require_single_bit(field)
    return get_field(code, field) == 1


def set_bool_field(code: int, field: ConfigField, value: bool) -> int:
    """Return ``code`` with the single-bit ``field`` set to ``value``."""
    _require_single_bit(field)
    return set_field(code, field, int(bool(value)))