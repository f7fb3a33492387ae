"""
CHIP-8 SDK Error Hierarchy
==========================

This module defines the exception hierarchy for the CHIP-8 assembler.
All exceptions inherit from Chip8Error, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
└── AssemblerError (assembler-related)
    ├── AssemblySyntaxError - source text does not match the grammar
    │   ├── UnknownCharacterError - character that starts no token
    │   ├── UnknownInstructionError - word that is not a mnemonic
    │   ├── ExpectedFoundError - wrong token at a given position
    │   └── BadSkipTypeError - unknown SKIP condition suffix
    ├── BadArgumentError - operands don't fit the instruction
    ├── UnresolvedLabelError - reference to an undefined label
    ├── DuplicateLabelError - label defined more than once
    └── BinaryTooLargeError - image does not fit in program memory

Assembly is fail-fast: the first error raised in any phase aborts the run.

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            assembler.assemble_file("game.c8a")
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Chip8Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> Optional[int]:
        """The 1-based source line of the error, if it has one."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            game.c8a:4:5: error: bad argument for MOV
                mov I, I
                ^
            hint: MOV accepts: V, byte | V, V | I, address
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised when the lexer or parser encounters text that cannot be
    tokenized or grouped into statements according to the grammar.
    """
    pass


class UnknownCharacterError(AssemblySyntaxError):
    """
    A character that cannot start any token.

    Example:
        MOV V1, @   ; '@' is not part of the source syntax
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unknown character {char!r}",
            location=location,
            source_line=source_line,
        )


class UnknownInstructionError(AssemblySyntaxError):
    """
    A statement starts with a word that is not a known mnemonic.
    """

    def __init__(
        self,
        word: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.word = word
        super().__init__(
            f"unknown instruction '{word}'",
            location=location,
            source_line=source_line,
        )


class ExpectedFoundError(AssemblySyntaxError):
    """
    The parser expected one kind of token and found another.

    Examples:
        MOV V0 V1       ; expected comma, found register
        _loop           ; expected label definition, found label reference
    """

    def __init__(
        self,
        expected: str,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(
            f"expected {expected}, found {found}",
            location=location,
            source_line=source_line,
        )


class BadSkipTypeError(AssemblySyntaxError):
    """
    SKIP was given a condition suffix outside EQ, NE, KD and KU.
    """

    def __init__(
        self,
        suffix: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.suffix = suffix
        super().__init__(
            f"bad skip type '{suffix}'",
            location=location,
            hint="valid skip types are EQ, NE, KD, KU",
            source_line=source_line,
        )


class BadArgumentError(AssemblerError):
    """
    Operands don't match any legal form of the instruction.

    Raised for a wrong operand count, a wrong operand class (for example
    the index register used where only V registers are allowed) or a
    value that does not fit the operand's field.

    Example:
        RAND I, #5  ; RAND needs a V register destination
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_forms: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.valid_forms = valid_forms or []

        hint = None
        if self.valid_forms:
            hint = f"{mnemonic} accepts: {' | '.join(self.valid_forms)}"

        super().__init__(
            f"bad argument for {mnemonic}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnresolvedLabelError(AssemblerError):
    """
    Reference to a label that is never defined.

    Raised during the second resolver pass. Similarly-named labels are
    suggested to help catch typos.
    """

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.name = name
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"could not resolve the address of label '{name}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateLabelError(AssemblerError):
    """
    Label defined more than once.

    Redefinition is rejected rather than overwritten; the hint points
    at the first definition.
    """

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.name = name
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{name}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{name}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class BinaryTooLargeError(AssemblerError):
    """
    The assembled image does not fit between the load address and the
    top of memory. Carries only aggregate sizes.
    """

    def __init__(self, actual_size: int, max_size: int):
        self.actual_size = actual_size
        self.max_size = max_size
        super().__init__(
            f"binary too large: {actual_size} bytes (maximum {max_size})",
            hint=f"program is {actual_size - max_size} bytes over the limit",
        )
