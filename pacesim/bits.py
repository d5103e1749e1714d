"""Little-endian integer packing and textual binary (0/1 string) encoding."""

from __future__ import annotations

import os

__all__ = [
    "int_to_binary",
    "int_from_binary",
    "bytes_to_binary_str",
    "bytes_from_binary_str",
    "read_binary_prog_file",
]


def int_to_binary(value: int, size: int) -> bytes:
    """Encode an unsigned integer as ``size`` little-endian bytes."""
    return value.to_bytes(size, "little", signed=False)


def int_from_binary(data: bytes, size: int) -> int:
    """Decode an unsigned little-endian integer that must be exactly ``size`` bytes."""
    if len(data) != size:
        raise ValueError(
            f"Invalid binary length: expected {size}, got {len(data)}"
        )
    return int.from_bytes(bytes(data), "little", signed=False)


def bytes_to_binary_str(data: bytes) -> str:
    """Render bytes as a string of '0'/'1' characters, eight per byte, MSB first."""
    return "".join(f"{byte:08b}" for byte in data)


def bytes_from_binary_str(text: str) -> bytes:
    """Parse a string of '0'/'1' characters into bytes, eight characters per byte."""
    if any(ch not in "01" for ch in text):
        raise ValueError("Binary string must contain only '0' and '1' characters")
    if len(text) % 8 != 0:
        raise ValueError(
            f"Binary string length ({len(text)}) must be a multiple of 8"
        )
    return bytes(int(text[start:start + 8], 2) for start in range(0, len(text), 8))


def read_binary_prog_file(path: str | os.PathLike[str]) -> bytes:
    """Read a binary program text file, ignoring spaces and line breaks."""
    with open(path, encoding="utf-8") as handle:
        text = handle.read()
    return bytes_from_binary_str(text.replace(" ", "").replace("\n", ""))