"""
CHIP-8 Code Generator
=====================

This module generates a CHIP-8 program image from parsed statements.
It implements a two-pass assembly process:

Pass 1 (Address Assignment)
---------------------------
- Scan all statements sequentially from $200
- Record each statement's address
- Build the label table

Pass 2 (Resolution and Encoding)
--------------------------------
- Replace label references with addresses
- Encode each statement into its bytes

Emission
--------
- Concatenate the encoded statements in program order
- Reject images larger than the space above $200

Output Formats
--------------
- Raw binary image (no header, loaded at $200)
- Listing file with addresses and source
- Symbol table file
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Optional

from chip8_sdk.errors import BinaryTooLargeError
from chip8_sdk.assembler.encoder import encode_statement
from chip8_sdk.assembler.parser import Instruction, LabelDef, Statement
from chip8_sdk.assembler.resolver import (
    ResolverContext,
    assign_addresses,
    resolve_instruction,
)
from chip8_sdk.cpu import MAX_PROGRAM_SIZE, PROGRAM_START

logger = logging.getLogger(__name__)


# =============================================================================
# Pipeline Phases
# =============================================================================

class AssemblyPhase(Enum):
    """
    Phases of one assembly run, in order.

    FAILED is entered from any phase when an error is raised.
    """
    LEXING = auto()
    PARSING = auto()
    RESOLVE_PASS1 = auto()
    RESOLVE_PASS2 = auto()
    EMITTING = auto()
    DONE = auto()
    FAILED = auto()


PhaseCallback = Callable[[AssemblyPhase], None]


# =============================================================================
# Binary Image
# =============================================================================

@dataclass(frozen=True)
class BinaryImage:
    """
    A validated program image.

    Attributes:
        data: The program bytes
        origin: Load address of the first byte
    """
    data: bytes
    origin: int = PROGRAM_START

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    @property
    def end(self) -> int:
        """Address one past the last byte."""
        return self.origin + len(self.data)

    def write_to_file(self, filepath: str | Path) -> None:
        """Write the raw image (no header)."""
        Path(filepath).write_bytes(self.data)


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates a CHIP-8 program image from parsed statements.

    The code generator keeps the state of the last run:
    - Resolver context (label table)
    - Encoded bytes of each statement for the listing

    Usage:
        codegen = CodeGenerator()
        image = codegen.generate(statements, source.splitlines())
        codegen.write_listing("game.lst")
    """

    def __init__(self, phase_callback: Optional[PhaseCallback] = None):
        """
        Initialize the code generator.

        Args:
            phase_callback: Optional function called with the new
                            AssemblyPhase as each pass starts.
        """
        self._phase_callback = phase_callback
        self._context = ResolverContext()
        self._units: list[tuple[Statement, bytes]] = []

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate(
        self,
        statements: list[Statement],
        source_lines: Optional[list[str]] = None,
    ) -> BinaryImage:
        """
        Generate the program image from parsed statements.

        This is the main entry point for code generation.

        Args:
            statements: List of parsed statements
            source_lines: Source text lines for error context and listing

        Returns:
            The validated BinaryImage

        Raises:
            AssemblerError: If any pass fails
        """
        # Reset state for fresh assembly
        self._context = ResolverContext(source_lines=list(source_lines or []))
        self._units = []

        self._enter(AssemblyPhase.RESOLVE_PASS1)
        self._pass1(statements)

        self._enter(AssemblyPhase.RESOLVE_PASS2)
        self._pass2(statements)

        self._enter(AssemblyPhase.EMITTING)
        return self._emit()

    def get_origin(self) -> int:
        return self._context.origin

    def get_symbols(self) -> dict[str, int]:
        """Get label name to address mapping."""
        return self._context.labels.as_dict()

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing addresses, generated bytes, and source lines.
        """
        lines = []
        lines.append("CHIP-8 Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr   Code          Line  Source")
        lines.append("-" * 60)
        lines.extend(self._listing_lines())
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for name, address in sorted(self._context.labels.items()):
            lines.append(f"{name:20s} = ${address:04X}")
        return "\n".join(lines)

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write assembly listing file.

        The listing shows addresses, generated bytes, and source lines.
        """
        with open(filepath, "w") as f:
            f.write(self.get_listing())
            f.write("\n")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line)
        """
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by c8asm\n")
            for name, address in sorted(self._context.labels.items()):
                f.write(f"{name} ${address:04X}\n")

    # =========================================================================
    # Passes
    # =========================================================================

    def _enter(self, phase: AssemblyPhase) -> None:
        logger.debug("phase %s", phase.name)
        if self._phase_callback is not None:
            self._phase_callback(phase)

    def _pass1(self, statements: list[Statement]) -> None:
        """First pass: assign addresses and collect labels."""
        assign_addresses(statements, self._context)
        logger.debug(
            "pass 1: %d statements, %d labels, end at $%04X",
            len(statements), len(self._context.labels), self._context.counter,
        )

    def _pass2(self, statements: list[Statement]) -> None:
        """Second pass: resolve references and encode each statement."""
        for stmt in statements:
            if isinstance(stmt, Instruction):
                resolve_instruction(stmt, self._context)
            self._units.append((stmt, encode_statement(stmt)))

    def _emit(self) -> BinaryImage:
        """Concatenate encoded statements and validate the image size."""
        data = b"".join(code for _, code in self._units)

        if len(data) > MAX_PROGRAM_SIZE:
            raise BinaryTooLargeError(len(data), MAX_PROGRAM_SIZE)

        logger.debug("emitted %d bytes at $%04X", len(data), self._context.origin)
        return BinaryImage(data, self._context.origin)

    # =========================================================================
    # Listing
    # =========================================================================

    def _listing_lines(self) -> list[str]:
        """One listing row per statement: address, bytes, line, source."""
        rows = []
        for stmt, code in self._units:
            hex_str = " ".join(f"{b:02X}" for b in code)
            source = self._context.source_line(stmt.location.line)
            if source is None:
                source = f"{stmt.name}:" if isinstance(stmt, LabelDef) else str(stmt)
            rows.append(
                f"${stmt.address:04X}  {hex_str:12s}  {stmt.location.line:4d}  {source.strip()}"
            )
        return rows
