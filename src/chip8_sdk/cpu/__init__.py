"""
CHIP-8 SDK CPU Package
======================

This package contains the CHIP-8 architecture definitions used by the
assembler: memory map constants, the mnemonic and SKIP condition
enumerations, operand kinds and the instruction form table.

Modules:
    chip8: Instruction set definitions and lookup helpers.

Usage:
    from chip8_sdk.cpu import (
        Mnemonic,
        OperandKind,
        FORM_TABLE,
        get_forms,
    )
"""

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_sdk.cpu.chip8 import (
    # Memory map
    PROGRAM_START,
    MEMORY_SIZE,
    MAX_PROGRAM_SIZE,
    REGISTER_COUNT,
    ADDRESS_MAX,
    BYTE_MAX,
    NIBBLE_MAX,
    INSTRUCTION_SIZE,
    # Core types
    Mnemonic,
    SkipCondition,
    OperandKind,
    InstructionForm,
    FIELD_MASKS,
    # Master instruction database
    FORM_TABLE,
    MNEMONICS,
    SKIP_CONDITIONS,
    # Lookup functions
    get_forms,
    format_mnemonic,
    is_valid_mnemonic,
)

__all__ = [
    "PROGRAM_START",
    "MEMORY_SIZE",
    "MAX_PROGRAM_SIZE",
    "REGISTER_COUNT",
    "ADDRESS_MAX",
    "BYTE_MAX",
    "NIBBLE_MAX",
    "INSTRUCTION_SIZE",
    "Mnemonic",
    "SkipCondition",
    "OperandKind",
    "InstructionForm",
    "FIELD_MASKS",
    "FORM_TABLE",
    "MNEMONICS",
    "SKIP_CONDITIONS",
    "get_forms",
    "format_mnemonic",
    "is_valid_mnemonic",
]
