"""Command-line converters for AGU files and PE programs."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from .agu import AGU
from .bits import bytes_from_binary_str, bytes_to_binary_str
from .configuration import Program

__all__ = [
    "convert_agu",
    "convert_config",
    "convert_agu_main",
    "convert_config_main",
]


def convert_agu(input_path: str | os.PathLike[str]) -> tuple[Path, Path]:
    """Write ``<input>.cm`` and ``<input>.arf`` next to the AGU file; return both paths."""
    input_path = Path(input_path)
    agu = AGU.from_mnemonics(input_path.read_text(encoding="utf-8"))
    cm_binary, arf_binary = agu.to_binary_str()
    cm_path = input_path.with_name(input_path.name + ".cm")
    arf_path = input_path.with_name(input_path.name + ".arf")
    cm_path.write_text(cm_binary, encoding="utf-8")
    arf_path.write_text(arf_binary, encoding="utf-8")
    return cm_path, arf_path


def convert_config(
    input_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str] | None = None,
) -> Path:
    """Convert ``.binprog`` to ``.prog`` or ``.prog`` to ``.binprog``; return the output path."""
    input_path = Path(input_path)
    extension = input_path.suffix
    if extension not in (".binprog", ".prog"):
        raise ValueError("Invalid file extension")
    text = input_path.read_text(encoding="utf-8")
    if extension == ".binprog":
        compact = text.replace(" ", "").replace("\n", "")
        program = Program.from_binary(bytes_from_binary_str(compact))
        content = program.to_mnemonics()
        default_suffix = ".prog"
    else:
        program = Program.from_mnemonics(text)
        content = bytes_to_binary_str(program.to_binary())
        default_suffix = ".binprog"
    output = Path(output_path) if output_path is not None else input_path.with_suffix(
        default_suffix
    )
    output.write_text(content, encoding="utf-8")
    return output


def _arguments(argv: list[str] | None) -> list[str]:
    return list(sys.argv[1:] if argv is None else argv)


def convert_agu_main(argv: list[str] | None = None) -> int:
    """Entry point: ``convert_agu <input_file>``."""
    args = _arguments(argv)
    if len(args) != 1:
        print("Usage: convert_agu <input_file>", file=sys.stderr)
        return 1
    try:
        paths = convert_agu(args[0])
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for path in paths:
        print(f"Conversion complete, written to: {path}")
    return 0


def convert_config_main(argv: list[str] | None = None) -> int:
    """Entry point: ``convert_config <input_file> [<output_file>]``."""
    args = _arguments(argv)
    if len(args) not in (1, 2):
        print("Usage: convert_config <input_file> (<output_file>)", file=sys.stderr)
        return 1
    try:
        output = convert_config(*args)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Conversion complete, written to: {output}")
    return 0