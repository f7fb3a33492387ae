"""
CHIP-8 SDK Command-Line Interface
=================================

This package provides command-line tools for the CHIP-8 SDK:

- **c8asm**: CHIP-8 assembler

The tool is implemented as a Click-based CLI application with
help and error reporting.
"""

__all__ = ["c8asm"]
