"""PE configurations and programs: the 64-bit binary word and the mnemonic syntax."""

from __future__ import annotations

from dataclasses import dataclass, field

from .bits import int_from_binary, int_to_binary
from .operation import Operation, parse_operation
from .router import RouterConfig

__all__ = [
    "Configuration",
    "Program",
    "parse_configuration",
]

_WORD_BYTES = 8
_MULTISPACE = " \t\r\n"


@dataclass(frozen=True)
class Configuration:
    """One cycle's configuration of a PE: an operation plus a router setting."""

    operation: Operation
    router_config: RouterConfig = field(default_factory=RouterConfig)

    def to_u64(self) -> int:
        """Encode as a 64-bit configuration word."""
        return self.router_config.to_u64() | self.operation.to_u64()

    def to_binary(self) -> bytes:
        """Encode as eight little-endian bytes."""
        return int_to_binary(self.to_u64(), _WORD_BYTES)

    @classmethod
    def from_binary(cls, data: bytes) -> Configuration:
        """Decode from exactly eight little-endian bytes."""
        code = int_from_binary(data, _WORD_BYTES)
        return cls(
            operation=Operation.from_u64(code),
            router_config=RouterConfig.from_u64(code),
        )

    def to_mnemonics(self) -> str:
        """Render as the operation line followed by the router configuration."""
        return f"{self.operation.to_mnemonics()}\n{self.router_config.to_mnemonics()}"

    @classmethod
    def from_mnemonics(cls, text: str) -> Configuration:
        """Parse a single configuration; the whole text must be consumed."""
        configuration, rest = parse_configuration(text)
        if rest:
            raise ValueError(f"Invalid configuration: {rest}")
        return configuration


def parse_configuration(text: str) -> tuple[Configuration, str]:
    """Parse one configuration and return it with the unparsed remainder."""
    rest = text.lstrip(_MULTISPACE)
    operation, rest = parse_operation(rest)
    rest = rest.lstrip(_MULTISPACE)
    router_config, rest = RouterConfig.parse_router_config(rest)
    rest = rest.lstrip(_MULTISPACE)
    return Configuration(operation, router_config), rest


@dataclass
class Program:
    """A sequence of configurations executed by one PE."""

    configurations: list[Configuration] = field(default_factory=list)

    def to_binary(self) -> bytes:
        """Concatenate the binary encoding of every configuration."""
        return b"".join(config.to_binary() for config in self.configurations)

    @classmethod
    def from_binary(cls, data: bytes) -> Program:
        """Decode a program whose length must be a multiple of eight bytes."""
        data = bytes(data)
        if len(data) % _WORD_BYTES != 0:
            raise ValueError("Invalid binary length, not multiple of 8")
        return cls([
            Configuration.from_binary(data[start:start + _WORD_BYTES])
            for start in range(0, len(data), _WORD_BYTES)
        ])

    def to_mnemonics(self) -> str:
        """Render every configuration, separated by blank lines."""
        return "\n\n".join(config.to_mnemonics() for config in self.configurations)

    @classmethod
    def from_mnemonics(cls, text: str) -> Program:
        """Parse a program; the whole text must consist of configurations."""
        rest = text.lstrip(_MULTISPACE)
        configurations: list[Configuration] = []
        failure: ValueError | None = None
        while rest:
            try:
                configuration, rest = parse_configuration(rest)
            except ValueError as exc:
                failure = exc
                break
            configurations.append(configuration)
        if rest:
            raise ValueError(f"Invalid program: \n{rest}") from failure
        return cls(configurations)