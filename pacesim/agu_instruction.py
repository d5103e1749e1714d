"""AGU instructions: fields, the textual forms and the one-byte encoding."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from .bits import int_to_binary

__all__ = [
    "InstType",
    "InstMode",
    "DataWidth",
    "Instruction",
    "InstructionSyntaxError",
    "AGUCM",
    "AGUARF",
    "parse_instruction",
]

_log = logging.getLogger(__name__)

_MULTISPACE = " \t\r\n"
_DIGITS = re.compile(r"[0-9]+")
_U8_TEXT = re.compile(r"\+?[0-9]+")
_U8_MAX = 0xFF
_STRIDE_LIMIT = 16
_ARF_BYTES = 2


class InstructionSyntaxError(ValueError):
    """The text does not match the AGU instruction syntax."""


class InstType(Enum):
    """Whether the instruction loads or stores."""

    LOAD = 0
    STORE = 1

    def __str__(self) -> str:
        return self.name


class InstMode(Enum):
    """Whether the address advances by a stride or stays constant."""

    STRIDED = 0
    CONST = 1

    def __str__(self) -> str:
        return self.name


class DataWidth(Enum):
    """Width of each memory access."""

    B8 = 0
    B16 = 1
    B64 = 2

    def __str__(self) -> str:
        return self.name

    @property
    def byte_count(self) -> int:
        """Number of bytes one access of this width covers."""
        return _BYTE_COUNTS[self]


_BYTE_COUNTS = {DataWidth.B8: 1, DataWidth.B16: 2, DataWidth.B64: 8}


def _enum_from_name(enum_cls, name: str):
    try:
        return enum_cls[name]
    except KeyError:
        raise ValueError(f"Invalid {enum_cls.__name__}: {name!r}") from None


@dataclass(frozen=True)
class Instruction:
    """One AGU instruction; the stride is a 4-bit value."""

    inst_type: InstType
    inst_mode: InstMode
    data_width: DataWidth
    stride: int = 0

    @classmethod
    def from_str(cls, text: str) -> Instruction:
        """Parse the compact ``TYPE,MODE,WIDTH,STRIDE`` form with no spaces."""
        parts = text.split(",")
        if len(parts) != 4:
            raise ValueError(f"Invalid instruction format: {text}")
        type_name, mode_name, width_name, stride_text = parts
        if not _U8_TEXT.fullmatch(stride_text) or int(stride_text) > _U8_MAX:
            raise ValueError(f"Invalid stride: {stride_text!r}")
        return cls(
            inst_type=_enum_from_name(InstType, type_name),
            inst_mode=_enum_from_name(InstMode, mode_name),
            data_width=_enum_from_name(DataWidth, width_name),
            stride=int(stride_text),
        )

    def to_binary_str(self) -> str:
        """Render as eight '0'/'1' characters: type, mode, width (2), stride (4)."""
        if not 0 <= self.stride < _STRIDE_LIMIT:
            raise ValueError("Stride must be less than 16")
        return (
            f"{self.inst_type.value:b}{self.inst_mode.value:b}"
            f"{self.data_width.value:02b}{self.stride:04b}"
        )

    @classmethod
    def from_byte(cls, value: int) -> Instruction:
        """Decode one byte: bit 7 type, bit 6 mode, bits 5-4 width, bits 3-0 stride."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Not a byte: {value}")
        width_bits = (value >> 4) & 0b11
        try:
            data_width = DataWidth(width_bits)
        except ValueError:
            raise ValueError("Invalid data width") from None
        return cls(
            inst_type=InstType((value >> 7) & 1),
            inst_mode=InstMode((value >> 6) & 1),
            data_width=data_width,
            stride=value & 0b1111,
        )

    def to_byte(self) -> int:
        """Encode as one byte; the stride is truncated to four bits."""
        return (
            (self.inst_type.value << 7)
            | (self.inst_mode.value << 6)
            | (self.data_width.value << 4)
            | (self.stride & 0b1111)
        )

    def __str__(self) -> str:
        return f"{self.inst_type},{self.inst_mode},{self.data_width},{self.stride}"


def _keyword(text: str, enum_cls, names: tuple[str, ...]):
    for name in names:
        if text.startswith(name):
            return enum_cls[name], text[len(name):]
    raise InstructionSyntaxError(f"Expected one of {names} at: {text[:40]!r}")


def _comma(text: str) -> str:
    rest = text.lstrip(_MULTISPACE)
    if not rest.startswith(","):
        raise InstructionSyntaxError(f"Expected ',' at: {rest[:40]!r}")
    return rest[1:].lstrip(_MULTISPACE)


def parse_instruction(text: str) -> tuple[Instruction, str]:
    """Parse ``TYPE , MODE , WIDTH , STRIDE`` and return it with the remainder."""
    inst_type, rest = _keyword(text, InstType, ("LOAD", "STORE"))
    inst_mode, rest = _keyword(_comma(rest), InstMode, ("STRIDED", "CONST"))
    data_width, rest = _keyword(_comma(rest), DataWidth, ("B8", "B16", "B64"))
    rest = _comma(rest)
    match = _DIGITS.match(rest)
    if match is None:
        raise InstructionSyntaxError(f"Expected a stride at: {rest[:40]!r}")
    stride = int(match.group())
    if stride > _U8_MAX:
        raise ValueError(f"Stride out of range: {match.group()}")
    if inst_mode is InstMode.CONST and stride != 0:
        _log.warning(
            "Warning when loading AGU configuration: you are in CONST mode "
            "but you specified stride in the instruction"
        )
    instruction = Instruction(inst_type, inst_mode, data_width, stride)
    return instruction, rest[match.end():]


@dataclass
class AGUCM:
    """The AGU control memory: its instructions."""

    instructions: list[Instruction] = field(default_factory=list)

    def to_binary(self) -> bytes:
        """One byte per instruction."""
        return bytes(inst.to_byte() for inst in self.instructions)


@dataclass
class AGUARF:
    """The AGU address register file."""

    arfs: list[int] = field(default_factory=list)

    def to_binary(self) -> bytes:
        """Two little-endian bytes per address."""
        return b"".join(int_to_binary(addr, _ARF_BYTES) for addr in self.arfs)