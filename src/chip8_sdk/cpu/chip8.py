"""
CHIP-8 Instruction Set Definition
=================================

This module defines the CHIP-8 instruction set as understood by the
assembler: the closed set of mnemonics and SKIP conditions, the operand
kinds, and the form table mapping each legal operand signature to its
16-bit opcode template.

Every CHIP-8 instruction is exactly two bytes, stored big-endian.
Programs are loaded at $200 and may extend up to the top of the 4 KiB
address space.

Operand Kinds
-------------
| Kind     | Source syntax          | Field              |
|----------|------------------------|--------------------|
| REGISTER | V0 .. VF               | nibble (X or Y)    |
| INDEX    | I                      | implied by opcode  |
| ADDRESS  | #n, $n, %n, _label     | low 12 bits (NNN)  |
| BYTE     | #n, $n, %n  (0-255)    | low byte (NN)      |
| NIBBLE   | #n, $n, %n  (0-15)     | low nibble (N)     |

Opcode Templates
----------------
Each InstructionForm carries the opcode with all operand fields zeroed
and, for every operand, the bit shift at which its value is packed:

    ADD VX, VY  ->  $8004 with X << 8, Y << 4   ->  8XY4
    DRAW VX, VY, N  ->  $D000 with X << 8, Y << 4, N << 0

Reference
---------
- Cowgod's CHIP-8 Technical Reference:
  http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Memory Map
# =============================================================================

# Programs are loaded by the interpreter at this address
PROGRAM_START = 0x200

# Total addressable memory (4 KiB)
MEMORY_SIZE = 0x1000

# Largest image that fits between PROGRAM_START and the top of memory
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

# Number of general purpose registers (V0-VF)
REGISTER_COUNT = 16

# Largest value for each packed operand field
ADDRESS_MAX = 0xFFF
BYTE_MAX = 0xFF
NIBBLE_MAX = 0xF


# =============================================================================
# Mnemonics and Conditions
# =============================================================================

class Mnemonic(Enum):
    """The closed set of CHIP-8 assembler mnemonics."""
    CLS = "CLS"     # Clear the display
    DRAW = "DRAW"   # Draw sprite
    SCH = "SCH"     # Point I at the font character for VX
    JMP = "JMP"     # Jump
    CALL = "CALL"   # Call subroutine
    RET = "RET"     # Return from subroutine
    SKIP = "SKIP"   # Conditional skip (needs a condition suffix)
    JPC = "JPC"     # Jump to address + V0
    MOV = "MOV"     # Load register / index register
    ADD = "ADD"     # Add
    OR = "OR"       # Bitwise OR
    AND = "AND"     # Bitwise AND
    XOR = "XOR"     # Bitwise XOR
    SUB = "SUB"     # VX = VX - VY
    SUBN = "SUBN"   # VX = VY - VX
    SHR = "SHR"     # Shift right
    SHL = "SHL"     # Shift left
    RAND = "RAND"   # Random byte AND mask
    GDL = "GDL"     # Get delay timer
    KEY = "KEY"     # Wait for key press
    SDL = "SDL"     # Set delay timer
    SND = "SND"     # Set sound timer
    BCD = "BCD"     # Store BCD of VX at I
    RDP = "RDP"     # Register dump V0..VX to memory at I
    RLD = "RLD"     # Register load V0..VX from memory at I


class SkipCondition(Enum):
    """Condition suffixes accepted by SKIP (SKIP.EQ, SKIP.NE, ...)."""
    EQ = "EQ"   # Skip if equal
    NE = "NE"   # Skip if not equal
    KD = "KD"   # Skip if key VX is down
    KU = "KU"   # Skip if key VX is up


class OperandKind(Enum):
    """
    Operand classes an instruction form can require.

    Each kind determines which parsed operands are acceptable and how
    wide the packed field is.
    """
    REGISTER = auto()   # V0-VF
    INDEX = auto()      # I
    ADDRESS = auto()    # 12-bit value or label
    BYTE = auto()       # 8-bit value
    NIBBLE = auto()     # 4-bit value

    def __str__(self) -> str:
        """Return the short name used in form descriptions."""
        return {
            OperandKind.REGISTER: "V",
            OperandKind.INDEX: "I",
            OperandKind.ADDRESS: "address",
            OperandKind.BYTE: "byte",
            OperandKind.NIBBLE: "nibble",
        }[self]


# Field masks for packed operand kinds
FIELD_MASKS: dict[OperandKind, int] = {
    OperandKind.REGISTER: 0xF,
    OperandKind.ADDRESS: ADDRESS_MAX,
    OperandKind.BYTE: BYTE_MAX,
    OperandKind.NIBBLE: NIBBLE_MAX,
}


# =============================================================================
# Instruction Forms
# =============================================================================

@dataclass(frozen=True)
class InstructionForm:
    """
    One legal operand signature of an instruction and its encoding.

    Attributes:
        operands: Required operand kinds, in source order
        opcode: Opcode template with every operand field zeroed
        shifts: Bit shift for each operand (None where the operand is
                implied by the opcode, i.e. the index register)
    """
    operands: tuple[OperandKind, ...]
    opcode: int
    shifts: tuple[Optional[int], ...] = ()

    def __repr__(self) -> str:
        return f"InstructionForm(${self.opcode:04X}, {self.describe()})"

    def describe(self) -> str:
        """Operand signature for hints, e.g. 'V, V, nibble'."""
        if not self.operands:
            return "no operands"
        return ", ".join(str(kind) for kind in self.operands)


# Shorthand used to keep the form table readable
_V = OperandKind.REGISTER
_I = OperandKind.INDEX
_NNN = OperandKind.ADDRESS
_NN = OperandKind.BYTE
_N = OperandKind.NIBBLE

# Register field positions
_X = 8
_Y = 4

# =============================================================================
# Form Table
# =============================================================================
# Key: (mnemonic, skip condition or None)
# Value: tuple of InstructionForm, tried in order
#
# A mnemonic's forms never overlap: at each operand position the value
# kinds differ from the register kinds, so at most one form matches any
# operand list.
# =============================================================================

FORM_TABLE: dict[tuple[Mnemonic, Optional[SkipCondition]], tuple[InstructionForm, ...]] = {
    (Mnemonic.CLS, None): (InstructionForm((), 0x00E0),),
    (Mnemonic.RET, None): (InstructionForm((), 0x00EE),),

    (Mnemonic.JMP, None): (InstructionForm((_NNN,), 0x1000, (0,)),),
    (Mnemonic.CALL, None): (InstructionForm((_NNN,), 0x2000, (0,)),),
    (Mnemonic.JPC, None): (InstructionForm((_NNN,), 0xB000, (0,)),),

    (Mnemonic.SKIP, SkipCondition.EQ): (
        InstructionForm((_V, _NN), 0x3000, (_X, 0)),
        InstructionForm((_V, _V), 0x5000, (_X, _Y)),
    ),
    (Mnemonic.SKIP, SkipCondition.NE): (
        InstructionForm((_V, _NN), 0x4000, (_X, 0)),
        InstructionForm((_V, _V), 0x9000, (_X, _Y)),
    ),
    (Mnemonic.SKIP, SkipCondition.KD): (InstructionForm((_V,), 0xE09E, (_X,)),),
    (Mnemonic.SKIP, SkipCondition.KU): (InstructionForm((_V,), 0xE0A1, (_X,)),),

    (Mnemonic.MOV, None): (
        InstructionForm((_V, _NN), 0x6000, (_X, 0)),
        InstructionForm((_V, _V), 0x8000, (_X, _Y)),
        InstructionForm((_I, _NNN), 0xA000, (None, 0)),
    ),
    (Mnemonic.ADD, None): (
        InstructionForm((_V, _NN), 0x7000, (_X, 0)),
        InstructionForm((_V, _V), 0x8004, (_X, _Y)),
        InstructionForm((_I, _V), 0xF01E, (None, _X)),
    ),

    # ALU register-register operations (8XYn)
    (Mnemonic.OR, None): (InstructionForm((_V, _V), 0x8001, (_X, _Y)),),
    (Mnemonic.AND, None): (InstructionForm((_V, _V), 0x8002, (_X, _Y)),),
    (Mnemonic.XOR, None): (InstructionForm((_V, _V), 0x8003, (_X, _Y)),),
    (Mnemonic.SUB, None): (InstructionForm((_V, _V), 0x8005, (_X, _Y)),),
    (Mnemonic.SUBN, None): (InstructionForm((_V, _V), 0x8007, (_X, _Y)),),
    (Mnemonic.SHR, None): (InstructionForm((_V,), 0x8006, (_X,)),),
    (Mnemonic.SHL, None): (InstructionForm((_V,), 0x800E, (_X,)),),

    (Mnemonic.RAND, None): (InstructionForm((_V, _NN), 0xC000, (_X, 0)),),
    (Mnemonic.DRAW, None): (InstructionForm((_V, _V, _N), 0xD000, (_X, _Y, 0)),),

    # Timer, keyboard and memory operations (FXnn)
    (Mnemonic.GDL, None): (InstructionForm((_V,), 0xF007, (_X,)),),
    (Mnemonic.KEY, None): (InstructionForm((_V,), 0xF00A, (_X,)),),
    (Mnemonic.SDL, None): (InstructionForm((_V,), 0xF015, (_X,)),),
    (Mnemonic.SND, None): (InstructionForm((_V,), 0xF018, (_X,)),),
    (Mnemonic.SCH, None): (InstructionForm((_V,), 0xF029, (_X,)),),
    (Mnemonic.BCD, None): (InstructionForm((_V,), 0xF033, (_X,)),),
    (Mnemonic.RDP, None): (InstructionForm((_V,), 0xF055, (_X,)),),
    (Mnemonic.RLD, None): (InstructionForm((_V,), 0xF065, (_X,)),),
}


# =============================================================================
# Reference Sets
# =============================================================================

# Every mnemonic name (for parser lookup)
MNEMONICS: frozenset[str] = frozenset(m.value for m in Mnemonic)

# Every SKIP condition name
SKIP_CONDITIONS: frozenset[str] = frozenset(c.value for c in SkipCondition)

# Fixed size of every real instruction in bytes
INSTRUCTION_SIZE = 2


# =============================================================================
# Lookup Functions
# =============================================================================

def get_forms(
    mnemonic: Mnemonic,
    condition: Optional[SkipCondition] = None,
) -> tuple[InstructionForm, ...]:
    """
    Look up the legal forms of an instruction.

    Args:
        mnemonic: The instruction mnemonic
        condition: The SKIP condition (only for SKIP)

    Returns:
        Tuple of forms, empty if the combination does not exist
    """
    return FORM_TABLE.get((mnemonic, condition), ())


def format_mnemonic(mnemonic: Mnemonic, condition: Optional[SkipCondition] = None) -> str:
    """Return the source spelling of an instruction, e.g. 'SKIP.EQ'."""
    if condition is None:
        return mnemonic.value
    return f"{mnemonic.value}.{condition.value}"


def is_valid_mnemonic(name: str) -> bool:
    """
    Check if a word is a CHIP-8 mnemonic.

    Args:
        name: The word to check (case-insensitive)

    Returns:
        True if valid, False otherwise
    """
    return name.upper() in MNEMONICS
