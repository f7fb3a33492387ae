"""
CHIP-8 Assembler - Main Interface
=================================

This module provides the main Assembler class, which is the primary interface
for assembling CHIP-8 source code. It coordinates the lexer, parser and code
generator to produce a flat program image loaded at $200.

Example Usage
-------------
>>> from chip8_sdk.assembler import Assembler
>>>
>>> # Create assembler instance
>>> asm = Assembler()
>>>
>>> # Assemble from string
>>> asm.assemble_string('''
... _spr:
...     %00000000
...     %01000010
...     MOV I, _spr
...     MOV V0, #0
...     DRAW V0, V0, #2
... ''')
>>>
>>> # Get generated code
>>> code = asm.get_code()
>>> print(f"Generated {len(code)} bytes")
>>>
>>> # Write the program image
>>> asm.write_binary("sprite.c8")

Command-Line Usage
------------------
The assembler can also be invoked from the command line:

    $ c8asm game.c8a -o game.c8 -l game.lst -s game.sym

Options:
    -o, --output FILE      Output binary file
    -l, --listing FILE     Generate listing file
    -s, --symbols FILE     Generate symbol file
    -v, --verbose          Verbose output

Assembly Phases
---------------
Each run moves strictly forward through:

    LEXING -> PARSING -> RESOLVE_PASS1 -> RESOLVE_PASS2 -> EMITTING -> DONE

Any error moves the run to FAILED and is re-raised. The next run on the
same Assembler starts again at LEXING with fresh state.
"""

import logging
from pathlib import Path
from typing import Optional

from chip8_sdk.assembler.codegen import AssemblyPhase, BinaryImage, CodeGenerator
from chip8_sdk.assembler.lexer import Lexer
from chip8_sdk.assembler.parser import Parser
from chip8_sdk.errors import AssemblerError, SourceLocation, UnknownCharacterError

logger = logging.getLogger(__name__)

# Position of each phase in a successful run
_PHASE_ORDER = {
    AssemblyPhase.LEXING: 0,
    AssemblyPhase.PARSING: 1,
    AssemblyPhase.RESOLVE_PASS1: 2,
    AssemblyPhase.RESOLVE_PASS2: 3,
    AssemblyPhase.EMITTING: 4,
    AssemblyPhase.DONE: 5,
}


class Assembler:
    """
    Main CHIP-8 assembler class.

    This class provides a high-level interface for assembling CHIP-8
    source code into a raw program image.

    The assembler supports:
    - The CHIP-8 instruction set with named mnemonics (MOV, DRAW, SKIP.EQ, ...)
    - Labels with forward and backward references
    - Raw data literals (decimal, hex, binary)
    - Multiple output formats (binary, listing, symbols)

    Independent Assembler instances share no state.

    Attributes:
        verbose: If True, log progress messages at INFO level
        phase: The current AssemblyPhase (None before the first run)
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            verbose: Enable verbose output
        """
        self.verbose = verbose
        self.phase: Optional[AssemblyPhase] = None
        self._image: Optional[BinaryImage] = None
        self._codegen = CodeGenerator(phase_callback=self._enter_phase)

    # =========================================================================
    # Assembly
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> bytes:
        """
        Assemble source code from a string.

        The assembly pipeline is:
        1. Tokenize source (lexer)
        2. Build statements and validate operands (parser)
        3. Resolve labels and generate the image (code generator)

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Generated program bytes

        Raises:
            AssemblerError: If assembly fails
        """
        self.phase = None
        self._image = None

        try:
            self._enter_phase(AssemblyPhase.LEXING)
            tokens = list(Lexer(source, filename).tokenize())
            self._log("Read %d tokens from %s", len(tokens), filename)

            self._enter_phase(AssemblyPhase.PARSING)
            statements = Parser(tokens, filename, source).parse()
            self._log("Parsed %d statements", len(statements))

            image = self._codegen.generate(statements, source.splitlines())

            self._enter_phase(AssemblyPhase.DONE)
        except Exception:
            self.phase = AssemblyPhase.FAILED
            raise

        self._image = image
        self._log("Generated %d bytes of code", len(image))
        return image.data

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Generated program bytes

        Raises:
            AssemblerError: If assembly fails, including
                UnknownCharacterError for bytes that are not valid text
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)

        self._log("Assembling %s...", filepath)

        # Read source completely before lexing
        data = filepath.read_bytes()
        try:
            source = data.decode("utf-8")
        except UnicodeDecodeError as e:
            self.phase = AssemblyPhase.FAILED
            self._image = None
            raise _undecodable_byte(data, e.start, str(filepath)) from e

        return self.assemble_string(source, str(filepath))

    def _enter_phase(self, phase: AssemblyPhase) -> None:
        """Move the current run to a later phase."""
        if self.phase is AssemblyPhase.FAILED:
            raise AssemblerError(f"cannot enter {phase.name} after a failed run")
        if self.phase is not None and _PHASE_ORDER[phase] <= _PHASE_ORDER[self.phase]:
            raise AssemblerError(
                f"invalid phase transition {self.phase.name} -> {phase.name}"
            )
        self.phase = phase

    def _log(self, msg: str, *args) -> None:
        if self.verbose:
            logger.info(msg, *args)
        else:
            logger.debug(msg, *args)

    def _require_image(self) -> BinaryImage:
        if self._image is None or self.phase is not AssemblyPhase.DONE:
            raise AssemblerError("no successful assembly to write")
        return self._image

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> bytes:
        """
        Get the generated program bytes.

        Returns:
            Program bytes (empty if the last run did not succeed)
        """
        return self._image.data if self._image else b""

    def get_image(self) -> Optional[BinaryImage]:
        return self._image

    def get_origin(self) -> int:
        """
        Get the load address.

        Returns:
            Address of the first program byte ($200)
        """
        return self._codegen.get_origin()

    def get_symbols(self) -> dict[str, int]:
        """
        Get the label table.

        Returns:
            Dictionary mapping label names to addresses
        """
        if self._image is None:
            return {}
        return self._codegen.get_symbols()

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Assembly listing with addresses, code bytes, and source
        """
        self._require_image()
        return self._codegen.get_listing()

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write the raw program image (no header).

        Args:
            filepath: Output file path
        """
        image = self._require_image()
        image.write_to_file(filepath)

        self._log("Wrote %d bytes to %s", len(image), filepath)

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write assembly listing file.

        The listing file shows:
        - Addresses
        - Generated bytes
        - Source lines
        - Symbol table

        Args:
            filepath: Output file path
        """
        self._require_image()
        self._codegen.write_listing(filepath)

        self._log("Wrote listing to %s", filepath)

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Args:
            filepath: Output file path
        """
        self._require_image()
        self._codegen.write_symbols(filepath)

        self._log("Wrote symbols to %s", filepath)


def _undecodable_byte(data: bytes, offset: int, filename: str) -> UnknownCharacterError:
    """Report the first byte of a source file that is not valid text."""
    line_start = data.rfind(b"\n", 0, offset) + 1
    line_end = data.find(b"\n", offset)
    if line_end == -1:
        line_end = len(data)
    location = SourceLocation(
        filename, data.count(b"\n", 0, offset) + 1, offset - line_start + 1
    )
    return UnknownCharacterError(
        f"\\x{data[offset]:02x}",
        location,
        source_line=data[line_start:line_end].decode("utf-8", errors="replace"),
    )


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> bytes:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors

    Returns:
        Generated program bytes

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler()
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> bytes:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file

    Returns:
        Generated program bytes

    Raises:
        AssemblerError: If assembly fails
        FileNotFoundError: If source file not found
    """
    asm = Assembler()
    return asm.assemble_file(filepath)
