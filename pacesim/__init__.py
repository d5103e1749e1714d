"""Configuration encoding, mnemonics, FP8 values and AGU tools for a processing-element array."""

__version__ = "0.1.0"

__all__ = [
    "agu",
    "agu_instruction",
    "bits",
    "cli",
    "configuration",
    "fields",
    "fp8",
    "operation",
    "router",
]