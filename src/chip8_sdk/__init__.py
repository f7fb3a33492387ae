"""
CHIP-8 SDK - Assembler Toolchain for the CHIP-8 Virtual Machine
===============================================================

This package provides an assembler for CHIP-8 programs. CHIP-8 is a small
interpreted virtual machine with 4 KiB of memory, sixteen 8-bit registers
(V0-VF), a 12-bit index register (I) and 35 two-byte instructions.
Programs are loaded at address $200.

Main Components
---------------
- **assembler**: CHIP-8 assembler (c8asm)
    Converts assembly source files (.c8a) to raw program images (.c8)

- **cpu**: Instruction set definitions
    Mnemonics, skip conditions, operand kinds and the opcode form table

Quick Start
-----------
Assemble a program:
    >>> from chip8_sdk.assembler import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_file("game.c8a")
    >>> asm.write_binary("game.c8")

Or use the command-line tool:
    $ c8asm game.c8a -o game.c8

Reference Documentation
-----------------------
- Cowgod's CHIP-8 Technical Reference:
  http://devernay.free.fr/hacks/chip8/C8TECH10.HTM

Version History
---------------
1.0.0 - Initial release with the two-pass assembler
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_sdk.assembler import Assembler, AssemblyPhase, BinaryImage, assemble
from chip8_sdk.errors import (
    Chip8Error,
    SourceLocation,
    AssemblerError,
    AssemblySyntaxError,
    UnknownCharacterError,
    UnknownInstructionError,
    ExpectedFoundError,
    BadSkipTypeError,
    BadArgumentError,
    UnresolvedLabelError,
    DuplicateLabelError,
    BinaryTooLargeError,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "AssemblyPhase",
    "BinaryImage",
    "assemble",
    # Exception hierarchy
    "Chip8Error",
    "SourceLocation",
    "AssemblerError",
    "AssemblySyntaxError",
    "UnknownCharacterError",
    "UnknownInstructionError",
    "ExpectedFoundError",
    "BadSkipTypeError",
    "BadArgumentError",
    "UnresolvedLabelError",
    "DuplicateLabelError",
    "BinaryTooLargeError",
]
