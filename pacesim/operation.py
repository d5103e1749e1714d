"""PE operations: opcodes, the 64-bit binary encoding and the mnemonic syntax."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .fields import ConfigField, get_bool_field, get_field, set_field

__all__ = [
    "OperationType",
    "OpCode",
    "Operation",
    "parse_operation",
]

_PREFIX = "operation:"
_MULTISPACE = " \t\r\n"
_SPACE = " \t"
_DIGITS = re.compile(r"[0-9]+")
_ALPHA = re.compile(r"[A-Za-z]+")
_U8_MAX = 0xFF
_U16_MAX = 0xFFFF
_LOOP_LIMIT = 16


class OperationType(Enum):
    """Broad class an opcode belongs to."""

    ARITH_LOGIC = "ArithLogic"
    SIMD = "SIMD"
    MEMORY = "Memory"
    CONTROL = "Control"
    NOP = "NOP"


class OpCode(Enum):
    """Operation codes; each value is the 5-bit binary encoding."""

    NOP = 0
    ADD = 1
    SUB = 2
    MULT = 3
    SEXT = 4
    DIV = 5
    VADD = 6
    VMUL = 7
    LS = 8
    RS = 9
    ASR = 10
    AND = 11
    OR = 12
    XOR = 13
    LOADD = 14
    STORED = 15
    SEL = 16
    CMERGE = 17
    CMP = 18
    CLT = 19
    BR = 20
    CGT = 21
    MOVCL = 23
    LOAD = 24
    LOADB = 26
    STORE = 27
    STOREB = 29
    JUMP = 30
    MOVC = 31

    def __str__(self) -> str:
        return self.name

    def operation_type(self) -> OperationType:
        """Return the class of this opcode."""
        try:
            return _OPERATION_TYPES[self]
        except KeyError:
            raise ValueError(f"Operation {self.name} has no operation type") from None

    def to_binary(self) -> int:
        """Return the 5-bit encoding of this opcode."""
        return self.value

    @classmethod
    def from_binary(cls, code: int) -> OpCode:
        """Decode a 5-bit opcode."""
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Invalid operation code: {code}") from None

    @classmethod
    def from_name(cls, name: str) -> OpCode:
        """Look up an opcode by its mnemonic."""
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown operation: {name}") from None


_OPERATION_TYPES: dict[OpCode, OperationType] = {
    **{
        op: OperationType.ARITH_LOGIC
        for op in (
            OpCode.ADD, OpCode.SUB, OpCode.MULT, OpCode.DIV, OpCode.LS,
            OpCode.RS, OpCode.ASR, OpCode.AND, OpCode.OR, OpCode.XOR,
            OpCode.SEL, OpCode.CMERGE, OpCode.CMP, OpCode.CLT, OpCode.CGT,
        )
    },
    OpCode.NOP: OperationType.NOP,
    OpCode.VADD: OperationType.SIMD,
    OpCode.VMUL: OperationType.SIMD,
    **{
        op: OperationType.MEMORY
        for op in (
            OpCode.LOADD, OpCode.STORED, OpCode.LOAD,
            OpCode.STORE, OpCode.LOADB, OpCode.STOREB,
        )
    },
    **{
        op: OperationType.CONTROL
        for op in (OpCode.BR, OpCode.JUMP, OpCode.MOVC, OpCode.MOVCL)
    },
}

_LOADS = frozenset({OpCode.LOADB, OpCode.LOAD, OpCode.LOADD})
_STORES = frozenset({OpCode.STOREB, OpCode.STORE, OpCode.STORED})


@dataclass(frozen=True)
class Operation:
    """One PE operation with its optional immediate and loop bounds."""

    op_code: OpCode
    immediate: int | None = None
    update_res: bool = False
    loop_start: int | None = None
    loop_end: int | None = None

    def is_mem(self) -> bool:
        return self.op_code.operation_type() is OperationType.MEMORY

    def is_control(self) -> bool:
        return self.op_code.operation_type() is OperationType.CONTROL

    def is_arith_logic(self) -> bool:
        return self.op_code.operation_type() is OperationType.ARITH_LOGIC

    def is_simd(self) -> bool:
        return self.op_code.operation_type() is OperationType.SIMD

    def is_load(self) -> bool:
        return self.is_mem() and self.op_code in _LOADS

    def is_store(self) -> bool:
        return self.is_mem() and self.op_code in _STORES

    def to_u64(self) -> int:
        """Encode the operation bits of a 64-bit configuration word."""
        code = 0
        if self.op_code is OpCode.JUMP:
            if self.loop_start is None or self.loop_end is None:
                raise ValueError("JUMP operation requires loop start and loop end")
            code = set_field(code, ConfigField.OP_CODE, OpCode.JUMP.to_binary())
            code = set_field(code, ConfigField.LOOP_START, self.loop_start)
            code = set_field(code, ConfigField.LOOP_END, self.loop_end)
            return code
        if self.immediate is not None:
            code = set_field(code, ConfigField.MSB_BIT, 1)
            code = set_field(code, ConfigField.IMMEDIATE, self.immediate)
        code = set_field(code, ConfigField.OP_CODE, self.op_code.to_binary())
        code = set_field(code, ConfigField.ALU_UPDATE_RES_BIT, int(self.update_res))
        return code

    @classmethod
    def from_u64(cls, code: int) -> Operation:
        """Decode the operation bits of a 64-bit configuration word."""
        op_code = OpCode.from_binary(get_field(code, ConfigField.OP_CODE))
        if op_code is OpCode.JUMP:
            return cls(
                op_code=op_code,
                loop_start=get_field(code, ConfigField.LOOP_START),
                loop_end=get_field(code, ConfigField.LOOP_END),
            )
        immediate = (
            get_field(code, ConfigField.IMMEDIATE)
            if get_field(code, ConfigField.MSB_BIT) == 1
            else None
        )
        return cls(
            op_code=op_code,
            immediate=immediate,
            update_res=get_bool_field(code, ConfigField.ALU_UPDATE_RES_BIT),
        )

    def to_mnemonics(self) -> str:
        """Render as ``operation: ...`` text."""
        if self.op_code is OpCode.JUMP:
            if self.loop_start is None or self.loop_end is None:
                raise ValueError("JUMP operation requires loop start and loop end")
            return f"operation: JUMP [{self.loop_start}, {self.loop_end}]"
        marker = "! " if self.update_res else " "
        immediate = "" if self.immediate is None else str(self.immediate)
        return f"operation: {self.op_code.name}{marker}{immediate}"

    @classmethod
    def from_mnemonics(cls, text: str) -> Operation:
        """Parse an operation; any trailing text is ignored."""
        operation, _ = parse_operation(text)
        return operation


class _NoMatch(Exception):
    """A parser alternative did not apply."""


def _skip(text: str, chars: str) -> str:
    return text.lstrip(chars)


def _parse_number(text: str, limit: int) -> tuple[int, str]:
    match = _DIGITS.match(text)
    if match is None:
        raise _NoMatch
    value = int(match.group())
    if value > limit:
        raise ValueError(f"Number out of range: {match.group()}")
    return value, text[match.end():]


def _parse_nop(text: str) -> tuple[Operation, str]:
    if not text.startswith("NOP"):
        raise _NoMatch
    return Operation(OpCode.NOP), text[3:]


def _parse_jump(text: str) -> tuple[Operation, str]:
    if not text.startswith("JUMP"):
        raise _NoMatch
    rest = _skip(text[4:], _SPACE)
    if not rest.startswith("["):
        raise _NoMatch
    rest = _skip(rest[1:], _MULTISPACE)
    loop_start, rest = _parse_number(rest, _U8_MAX)
    if loop_start >= _LOOP_LIMIT:
        raise ValueError("Loop start must be within 4 bits")
    rest = _skip(rest, _MULTISPACE)
    if not rest.startswith(","):
        raise _NoMatch
    rest = _skip(rest[1:], _MULTISPACE)
    loop_end, rest = _parse_number(rest, _U8_MAX)
    if loop_end >= _LOOP_LIMIT:
        raise ValueError("Loop end must be within 4 bits")
    rest = _skip(rest, _MULTISPACE)
    if not rest.startswith("]"):
        raise _NoMatch
    operation = Operation(OpCode.JUMP, loop_start=loop_start, loop_end=loop_end)
    return operation, rest[1:]


def _parse_alu(text: str) -> tuple[Operation, str]:
    match = _ALPHA.match(text)
    if match is None:
        raise _NoMatch
    op_code = OpCode.from_name(match.group())
    rest = text[match.end():]
    update_res = rest.startswith("!")
    if update_res:
        rest = rest[1:]
    rest = _skip(rest, _SPACE)
    try:
        immediate, after = _parse_number(_skip(rest, _MULTISPACE), _U16_MAX)
    except _NoMatch:
        return Operation(op_code, update_res=update_res), rest
    return Operation(op_code, immediate=immediate, update_res=update_res), after


def parse_operation(text: str) -> tuple[Operation, str]:
    """Parse ``operation: ...`` and return the operation and the unparsed remainder."""
    if not text.startswith(_PREFIX):
        raise ValueError(f"Expected '{_PREFIX}' at: {text[:40]!r}")
    rest = _skip(text[len(_PREFIX):], _MULTISPACE)
    for parser in (_parse_nop, _parse_jump, _parse_alu):
        try:
            return parser(rest)
        except _NoMatch:
            continue
    raise ValueError(f"Invalid operation: {rest[:40]!r}")