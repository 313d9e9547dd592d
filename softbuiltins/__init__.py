"""Software IEEE-754 arithmetic, conversions, ARM runtime helpers, emulated atomics and build configuration."""

__version__ = "0.1.0"

__all__ = [
    "formats",
    "add",
    "compare",
    "conv",
    "extend",
    "mul",
    "div",
    "powi",
    "aeabi",
    "atomics",
    "buildcfg",
]