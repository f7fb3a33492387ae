"""
CHIP-8 Instruction Encoder
==========================

Turns resolved statements into bytes.

- Instruction: one big-endian 16-bit word built from the matched form's
  opcode template, each operand masked and shifted into its field
- Literal: its value as 2 big-endian bytes, or 1 byte for binary literals
- LabelDef: nothing

Operand ranges were checked against the form table when the statement
was parsed, so the encoder only packs fields. A label reference that
reaches the encoder means pass 2 was skipped.
"""

from chip8_sdk.errors import AssemblerError
from chip8_sdk.assembler.parser import (
    Immediate,
    IndexRegister,
    Instruction,
    LabelDef,
    LabelRef,
    Literal,
    Operand,
    Register,
    Statement,
)
from chip8_sdk.cpu import FIELD_MASKS


def encode_statement(stmt: Statement) -> bytes:
    """
    Encode a single resolved statement.

    Returns:
        The statement's bytes (empty for label definitions)

    Raises:
        AssemblerError: If the statement still holds a label reference
    """
    if isinstance(stmt, Instruction):
        return encode_word(encode_instruction(stmt))
    if isinstance(stmt, Literal):
        return encode_literal(stmt)
    if isinstance(stmt, LabelDef):
        return b""
    raise AssemblerError(f"cannot encode {type(stmt).__name__}", stmt.location)


def encode_instruction(inst: Instruction) -> int:
    """
    Build the 16-bit opcode of an instruction.

    Example:
        ADD V1, V2 matches the (V, V) form $8004 with shifts (8, 4),
        giving $8004 | 1 << 8 | 2 << 4 = $8124.
    """
    form = inst.form
    if form is None:
        raise AssemblerError(f"no form selected for {inst.name}", inst.location)

    opcode = form.opcode
    for operand, kind, shift in zip(inst.operands, form.operands, form.shifts):
        if shift is None:
            # Implied by the opcode (the index register)
            continue
        value = _operand_value(operand, inst)
        opcode |= (value & FIELD_MASKS[kind]) << shift

    return opcode


def encode_literal(lit: Literal) -> bytes:
    """Encode a raw data literal as 1 or 2 big-endian bytes."""
    return lit.value.to_bytes(lit.width, "big")


def encode_word(word: int) -> bytes:
    """Encode a 16-bit word big-endian."""
    return bytes([(word >> 8) & 0xFF, word & 0xFF])


def _operand_value(operand: Operand, inst: Instruction) -> int:
    """Get the numeric field value of a resolved operand."""
    if isinstance(operand, Register):
        return operand.index
    if isinstance(operand, Immediate):
        return operand.value
    if isinstance(operand, LabelRef):
        raise AssemblerError(
            f"label '{operand.name}' was not resolved before encoding",
            inst.location,
        )
    if isinstance(operand, IndexRegister):
        raise AssemblerError(f"index register has no field in {inst.name}", inst.location)
    raise AssemblerError(f"unknown operand {operand!r}", inst.location)
