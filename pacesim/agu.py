"""The address generation unit: its state, stepping and configuration formats."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .agu_instruction import (
    InstMode,
    Instruction,
    InstructionSyntaxError,
    parse_instruction,
)

__all__ = ["AGU", "AGUCompleted"]

_MULTISPACE = " \t\r\n"
_DIGITS = re.compile(r"[0-9]+")
_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF
_ARF_LIMIT = 8192


class AGUCompleted(Exception):
    """The AGU has run for its maximum number of iterations."""


def _expect(text: str, token: str) -> str:
    if not text.startswith(token):
        raise ValueError(f"Expected {token!r} at: {text[:40]!r}")
    return text[len(token):]


def _parse_digits(text: str) -> tuple[str, str]:
    match = _DIGITS.match(text)
    if match is None:
        raise InstructionSyntaxError(f"Expected a number at: {text[:40]!r}")
    return match.group(), text[match.end():]


def _parse_list(text: str, parse_item):
    """Items separated by whitespace; stops before the first item that does not parse."""
    items = []
    try:
        item, rest = parse_item(text)
    except InstructionSyntaxError:
        return items, text
    items.append(item)
    while True:
        after_sep = rest.lstrip(_MULTISPACE)
        if len(after_sep) == len(rest):
            raise ValueError(f"Expected whitespace between items at: {rest[:40]!r}")
        try:
            item, after = parse_item(after_sep)
        except InstructionSyntaxError:
            return items, rest
        items.append(item)
        rest = after


def _to_int(digits: str, limit: int, what: str) -> int:
    value = int(digits)
    if value > limit:
        raise ValueError(f"{what} out of range: {digits}")
    return value


@dataclass
class AGU:
    """AGU state: program counter, control memory, address registers and counters."""

    pc: int = 0
    cm: list[Instruction] = field(default_factory=list)
    arf: list[int] = field(default_factory=list)
    max_count: int = 0
    count: int = 0

    def is_enabled(self) -> bool:
        """The AGU is enabled when its maximum count is greater than zero."""
        return self.max_count > 0

    def update(self) -> int:
        """Return the address for the current instruction and advance its register."""
        if not self.is_enabled():
            raise RuntimeError("AGU is not enabled, you should not call this function")
        inst = self.cm[self.pc]
        addr = self.arf[self.pc]
        if inst.inst_mode is InstMode.STRIDED:
            new_addr = addr + inst.stride * inst.data_width.byte_count
            if new_addr > _U16_MAX:
                raise OverflowError(f"AGU address overflow at PC {self.pc}")
            self.arf[self.pc] = new_addr
        return addr

    def advance(self) -> None:
        """Move to the next instruction, raising AGUCompleted once the count is reached."""
        if self.count >= self.max_count:
            raise AGUCompleted("AGU execution completed")
        if self.pc == len(self.cm) - 1:
            self.pc = 0
            self.count += 1
        else:
            self.pc += 1

    @classmethod
    def from_mnemonics(cls, text: str) -> AGU:
        """Parse the ``CM:`` / ``ARF:`` / ``MAX COUNT:`` text form."""
        rest = _expect(text.lstrip(_MULTISPACE), "CM:")
        cm, rest = _parse_list(rest.lstrip(_MULTISPACE), parse_instruction)
        rest = _expect(rest.lstrip(_MULTISPACE), "ARF:")
        arf_digits, rest = _parse_list(rest.lstrip(_MULTISPACE), _parse_digits)
        rest = _expect(rest.lstrip(_MULTISPACE), "MAX COUNT:")
        try:
            count_digits, rest = _parse_digits(rest.lstrip(_MULTISPACE))
        except InstructionSyntaxError as exc:
            raise ValueError(str(exc)) from None
        rest = rest.lstrip(_MULTISPACE)
        if rest:
            raise ValueError(f"Unexpected trailing text: {rest[:40]!r}")

        max_count = _to_int(count_digits, _U32_MAX, "Max count")
        arf = [_to_int(digits, _U16_MAX, "Address") for digits in arf_digits]
        if len(arf) != len(cm):
            raise ValueError("ARF and CM must have the same length")
        if not arf:
            if max_count != 0:
                raise ValueError("max count must be 0 if the AGU is not used")
        elif max_count == 0:
            raise ValueError("max count must be greater than 0")
        return cls(pc=0, cm=cm, arf=arf, max_count=max_count, count=0)

    def to_binary_str(self) -> tuple[str, str]:
        """Return the CM and ARF as lines of '0'/'1' text (8 and 13 bits wide)."""
        cm_binary = "".join(inst.to_binary_str() + "\n" for inst in self.cm)
        lines = []
        for addr in self.arf:
            if not 0 <= addr < _ARF_LIMIT:
                raise ValueError("Address must be less than 8192")
            lines.append(f"{addr:013b}\n")
        return cm_binary, "".join(lines)

    def __str__(self) -> str:
        cm = "[" + ", ".join(str(inst) for inst in self.cm) + "]"
        return (
            f"PC: {self.pc}\n"
            f"CM: {cm}\n"
            f"ARF: {self.arf}\n"
            f"MAX COUNT: {self.max_count}\n"
            f"COUNT: {self.count}\n"
        )