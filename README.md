# pacesim

Tools for describing and encoding programs for a grid of processing
elements (PEs). Each PE runs a list of 64-bit configurations that combine
an operation with a router setting; an address generation unit (AGU)
supplies memory addresses.

The package can:

- parse configurations and programs written as text mnemonics and print
  them back (`pacesim.configuration.Configuration`,
  `pacesim.configuration.Program`, `from_mnemonics` / `to_mnemonics`);
- encode programs as eight little-endian bytes per configuration and decode
  them again (`Program.to_binary`, `Program.from_binary`), and turn bytes
  into `0`/`1` text and back (`pacesim.bits.bytes_to_binary_str`,
  `pacesim.bits.bytes_from_binary_str`, `pacesim.bits.read_binary_prog_file`);
- work on single operations and router settings on their own
  (`pacesim.operation.Operation`, `pacesim.router.RouterConfig`) and on the
  bit fields of the configuration word (`pacesim.fields`);
- round values to FP8 (E4M3: 1 sign bit, 4 exponent bits with bias 7,
  3 mantissa bits) and add or multiply them (`pacesim.fp8.FP8`);
- read AGU descriptions, step the AGU, and produce the binary text of its
  control memory and address registers (`pacesim.agu.AGU`,
  `pacesim.agu_instruction.Instruction`).

Malformed input raises `ValueError` (or a subclass of it).

## Installation

```
pip install .
```

## Program files

A program is a sequence of configurations separated by whitespace:

```
operation: ADD! 15
switch_config: {
    Open -> predicate,
    ALUOut -> south_out,
    Open -> west_out,
    Open -> north_out,
    Open -> east_out,
    WestIn -> alu_op2,
    NorthIn -> alu_op1,
};
input_register_used: {};
input_register_write: {};
```

`!` after the op code sets the result-register update bit; a number after
it is the 16-bit immediate. Loops are written `operation: JUMP [0, 5]`,
with both bounds below 16. Router outputs left out of `switch_config`
default to `Open`; a direction set may be written `{north, south}` or
`{all}`.

```python
from pacesim.bits import bytes_to_binary_str
from pacesim.configuration import Program

with open("kernel.prog") as handle:
    program = Program.from_mnemonics(handle.read())
print(bytes_to_binary_str(program.to_binary()))
```

## FP8

```python
from pacesim.fp8 import FP8

a = FP8(0x38)              # 1.0
b = FP8.from_float(2.0)    # 0x40
print(int(a + b), float(a * b))   # 68 (0x44), 2.0
```

Exponent 0 is zero (no subnormals); exponent 15 is infinity or NaN.
Only addition and multiplication are defined.

## AGU files

```
CM:
LOAD,STRIDED,B16,1
STORE,CONST,B64,0
ARF:
0
10
MAX COUNT:
5
```

```python
from pacesim.agu import AGU, AGUCompleted

with open("kernel.agu") as handle:
    agu = AGU.from_mnemonics(handle.read())
cm, arf = agu.to_binary_str()   # 8-bit and 13-bit lines

address = agu.update()          # address for the current instruction
agu.advance()                   # raises AGUCompleted after MAX COUNT rounds
```

An AGU with empty `CM:` and `ARF:` sections and `MAX COUNT: 0` is
disabled.

## Command-line tools

Convert between a text program (`.prog`) and its binary text form
(`.binprog`). Without an output path the result is written next to the
input with the other extension:

```
convert-config kernel.prog
convert-config kernel.binprog kernel_roundtrip.prog
```

Convert an AGU description into control memory and address register
files, written next to the input as `<input>.cm` and `<input>.arf`
(for example `kernel.agu.cm` and `kernel.agu.arf`):

```
convert-agu kernel.agu
```

Both commands exit with status 1 and a message on standard error when the
arguments or the input are wrong.

## What is not included

pacesim does not simulate the PE grid: there is no cycle-by-cycle model of
the PEs, the router network or the data memory, and no command to run a
program. Only the AGU can be stepped on its own.

## Tests

```
pip install .[test]
pytest
```