"""Router configuration: directions, switch settings, binary encoding and mnemonic syntax."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .fields import ConfigField, get_field, set_field

__all__ = [
    "Direction",
    "RouterInDir",
    "DirectionsOpt",
    "RouterSwitchConfig",
    "RouterConfig",
    "RouterParseError",
    "parse_assignment",
    "parse_switching_config",
    "parse_directions_opt",
    "parse_extra_config",
]

_MULTISPACE = " \t\r\n"
_SWITCH_CONFIG_BITS = 21


class RouterParseError(ValueError):
    """The text does not match the router configuration syntax."""


class Direction(Enum):
    """A cardinal direction of a PE port."""

    NORTH = "north"
    SOUTH = "south"
    WEST = "west"
    EAST = "east"


class RouterInDir(Enum):
    """A router input source; the value is its 3-bit binary encoding."""

    EAST_IN = 0
    SOUTH_IN = 1
    WEST_IN = 2
    NORTH_IN = 3
    ALU_OUT = 4
    ALU_RES = 5
    INVALID = 6
    OPEN = 7

    @classmethod
    def from_binary(cls, code: int) -> RouterInDir:
        """Decode a 3-bit router source code."""
        if not 0 <= code <= 7 or code == cls.INVALID.value:
            raise ValueError(f"Invalid router direction code: {code}")
        return cls(code)

    def to_binary(self) -> int:
        """Return the 3-bit encoding of this source."""
        if self is RouterInDir.INVALID:
            raise ValueError("Invalid router direction")
        return self.value

    def to_mnemonics(self) -> str:
        return _IN_DIR_MNEMONICS[self]

    def __str__(self) -> str:
        return self.to_mnemonics()


_IN_DIR_MNEMONICS: dict[RouterInDir, str] = {
    RouterInDir.EAST_IN: "EastIn",
    RouterInDir.SOUTH_IN: "SouthIn",
    RouterInDir.WEST_IN: "WestIn",
    RouterInDir.NORTH_IN: "NorthIn",
    RouterInDir.ALU_OUT: "ALUOut",
    RouterInDir.ALU_RES: "ALURes",
    RouterInDir.INVALID: "Invalid",
    RouterInDir.OPEN: "Open",
}

# Order in which the parser tries the input source keywords.
_IN_DIR_KEYWORDS: tuple[tuple[str, RouterInDir], ...] = (
    ("EastIn", RouterInDir.EAST_IN),
    ("SouthIn", RouterInDir.SOUTH_IN),
    ("WestIn", RouterInDir.WEST_IN),
    ("NorthIn", RouterInDir.NORTH_IN),
    ("ALUOut", RouterInDir.ALU_OUT),
    ("ALURes", RouterInDir.ALU_RES),
    ("Open", RouterInDir.OPEN),
)

_OUT_FIELDS: tuple[str, ...] = (
    "predicate",
    "alu_op1",
    "alu_op2",
    "east_out",
    "south_out",
    "west_out",
    "north_out",
)

_DIRECTION_BITS: tuple[tuple[str, int], ...] = (
    ("north", 0b1000),
    ("south", 0b0100),
    ("west", 0b0010),
    ("east", 0b0001),
)


@dataclass(frozen=True)
class DirectionsOpt:
    """A set of flags, one per direction."""

    north: bool = False
    south: bool = False
    west: bool = False
    east: bool = False

    @classmethod
    def from_binary(cls, code: int) -> DirectionsOpt:
        """Decode a 4-bit code in the order north, south, west, east (MSB first)."""
        if not 0 <= code < 16:
            raise ValueError(f"Invalid directions code: {code}")
        return cls(**{name: bool(code & bit) for name, bit in _DIRECTION_BITS})

    def to_binary(self) -> int:
        """Encode as a 4-bit code in the order north, south, west, east (MSB first)."""
        return sum(bit for name, bit in _DIRECTION_BITS if getattr(self, name))

    def to_mnemonics(self) -> str:
        """Render as ``{north,west}`` or ``{all}`` when every direction is set."""
        names = [name for name, _ in _DIRECTION_BITS if getattr(self, name)]
        if len(names) == len(_DIRECTION_BITS):
            return "{all}"
        return "{" + ",".join(names) + "}"

    def __str__(self) -> str:
        return self.to_mnemonics()


# Bit offset of each output within the 21-bit switch configuration, LSB first.
_SWITCH_LAYOUT: tuple[tuple[str, int], ...] = (
    ("east_out", 0),
    ("south_out", 3),
    ("west_out", 6),
    ("north_out", 9),
    ("alu_op1", 12),
    ("alu_op2", 15),
    ("predicate", 18),
)


@dataclass(frozen=True)
class RouterSwitchConfig:
    """The source selected for every router output."""

    predicate: RouterInDir = RouterInDir.OPEN
    alu_op2: RouterInDir = RouterInDir.OPEN
    alu_op1: RouterInDir = RouterInDir.OPEN
    north_out: RouterInDir = RouterInDir.OPEN
    west_out: RouterInDir = RouterInDir.OPEN
    south_out: RouterInDir = RouterInDir.OPEN
    east_out: RouterInDir = RouterInDir.OPEN

    @classmethod
    def from_u32(cls, code: int) -> RouterSwitchConfig:
        """Decode a 21-bit switch configuration code."""
        if not 0 <= code < (1 << _SWITCH_CONFIG_BITS):
            raise ValueError(f"Invalid router switch config code: {code}")
        return cls(**{
            name: RouterInDir.from_binary((code >> shift) & 0b111)
            for name, shift in _SWITCH_LAYOUT
        })

    def to_u32(self) -> int:
        """Encode as a 21-bit code, predicate in the top bits, east_out in the bottom."""
        return sum(getattr(self, name).to_binary() << shift for name, shift in _SWITCH_LAYOUT)

    def to_mnemonics(self) -> str:
        order = ("predicate", "south_out", "west_out", "north_out",
                 "east_out", "alu_op2", "alu_op1")
        lines = "".join(f"    {getattr(self, name)} -> {name},\n" for name in order)
        return "{\n" + lines + "}"

    def __str__(self) -> str:
        return self.to_mnemonics()


@dataclass(frozen=True)
class RouterConfig:
    """Switch settings plus the input register bypass and write-enable sets."""

    switch_config: RouterSwitchConfig = field(default_factory=RouterSwitchConfig)
    input_register_used: DirectionsOpt = field(default_factory=DirectionsOpt)
    input_register_write: DirectionsOpt = field(default_factory=DirectionsOpt)

    @classmethod
    def from_u64(cls, code: int) -> RouterConfig:
        """Decode the router bits of a 64-bit configuration word."""
        return cls(
            switch_config=RouterSwitchConfig.from_u32(
                get_field(code, ConfigField.ROUTER_SWITCH_CONFIG)
            ),
            input_register_used=DirectionsOpt.from_binary(
                get_field(code, ConfigField.ROUTER_BYPASS)
            ),
            input_register_write=DirectionsOpt.from_binary(
                get_field(code, ConfigField.ROUTER_WRITE_ENABLE)
            ),
        )

    def to_u64(self) -> int:
        """Encode the router bits of a 64-bit configuration word."""
        code = set_field(0, ConfigField.ROUTER_SWITCH_CONFIG, self.switch_config.to_u32())
        code = set_field(code, ConfigField.ROUTER_BYPASS, self.input_register_used.to_binary())
        return set_field(
            code, ConfigField.ROUTER_WRITE_ENABLE, self.input_register_write.to_binary()
        )

    def to_mnemonics(self) -> str:
        return (
            f"switch_config: {self.switch_config};\n"
            f"input_register_used: {self.input_register_used};\n"
            f"input_register_write: {self.input_register_write};"
        )

    @classmethod
    def parse_router_config(cls, text: str) -> tuple[RouterConfig, str]:
        """Parse switch and extra configuration; return the config and the remainder."""
        switch_config, rest = parse_switching_config(text)
        (used, write), rest = parse_extra_config(rest)
        return cls(switch_config, used, write), rest

    def __str__(self) -> str:
        return self.to_mnemonics()


def _ws(text: str) -> str:
    return text.lstrip(_MULTISPACE)


def _expect(text: str, token: str) -> str:
    if not text.startswith(token):
        raise RouterParseError(f"Expected {token!r} at: {text[:40]!r}")
    return text[len(token):]


def _parse_keyword(text: str, options):
    for keyword, value in options:
        if text.startswith(keyword):
            return value, text[len(keyword):]
    raise RouterParseError(f"Unexpected text: {text[:40]!r}")


def parse_assignment(text: str) -> tuple[tuple[str, RouterInDir], str]:
    """Parse ``Source -> output,`` and return ``(output, source)`` and the remainder."""
    source, rest = _parse_keyword(_ws(text), _IN_DIR_KEYWORDS)
    rest = _ws(_expect(_ws(rest), "->"))
    out_field, rest = _parse_keyword(rest, ((name, name) for name in _OUT_FIELDS))
    rest = _ws(_expect(_ws(rest), ","))
    return (out_field, source), rest


def parse_switching_config(text: str) -> tuple[RouterSwitchConfig, str]:
    """Parse ``switch_config: { ... };``; outputs not mentioned default to Open."""
    rest = _expect(_ws(text), "switch_config")
    rest = _expect(_ws(rest), ":")
    rest = _ws(_expect(_ws(rest), "{"))
    (out_field, source), rest = parse_assignment(rest)
    assignments = {out_field: source}
    while True:
        try:
            (out_field, source), rest = parse_assignment(rest)
        except RouterParseError:
            break
        assignments[out_field] = source
    rest = _expect(_ws(rest), "}")
    rest = _ws(_expect(_ws(rest), ";"))
    return RouterSwitchConfig(**assignments), rest


def _parse_direction(text: str) -> tuple[Direction, str]:
    return _parse_keyword(text, ((d.value, d) for d in
                                 (Direction.EAST, Direction.SOUTH,
                                  Direction.WEST, Direction.NORTH)))


def parse_directions_opt(text: str) -> tuple[DirectionsOpt, str]:
    """Parse a direction set such as ``{north, south}`` or ``{all}``."""
    rest = _expect(_ws(text), "{")
    if rest.startswith("all"):
        directions = list(Direction)
        rest = rest[3:]
    else:
        directions = []
        try:
            direction, rest = _parse_direction(rest)
        except RouterParseError:
            pass
        else:
            directions.append(direction)
            while True:
                try:
                    after_sep = _ws(_expect(_ws(rest), ","))
                    direction, after = _parse_direction(after_sep)
                except RouterParseError:
                    break
                directions.append(direction)
                rest = after
    rest = _expect(_ws(rest), "}")
    return DirectionsOpt(**{d.value: True for d in directions}), rest


def _parse_named_directions(text: str) -> tuple[tuple[str, DirectionsOpt], str]:
    names = ("input_register_used", "input_register_write")
    name, rest = _parse_keyword(_ws(text), ((n, n) for n in names))
    rest = _expect(_ws(rest), ":")
    directions, rest = parse_directions_opt(rest)
    rest = _expect(_ws(rest), ";")
    return (name, directions), rest


def parse_extra_config(text: str) -> tuple[tuple[DirectionsOpt, DirectionsOpt], str]:
    """Parse the ``input_register_used`` and ``input_register_write`` entries in either order."""
    empty = DirectionsOpt()
    values = {"input_register_used": empty, "input_register_write": empty}
    (name, directions), rest = _parse_named_directions(text)
    values[name] = directions
    (name, directions), rest = _parse_named_directions(rest)
    if values[name] != empty:
        raise ValueError(f"Multiple {name} fields found")
    values[name] = directions
    return (values["input_register_used"], values["input_register_write"]), rest