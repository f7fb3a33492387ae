"""
CHIP-8 Assembly Language Lexer
==============================

This module implements a lexer (tokenizer) for CHIP-8 assembly language.
It converts source text into a stream of tokens that the parser can process.

Token Types
-----------
- WORD: Mnemonics and SKIP conditions (MOV, DRAW, EQ, ...)
- REGISTER: V0-VF and the index register I
- DECIMAL, HEX, BINARY: Numeric literals
- LABEL_REF: Label reference (_name)
- LABEL_DEF: Label definition (_name:)
- Delimiters: COMMA (,), PERIOD (.)
- NEWLINE: End of line
- EOF: End of file

Number Formats
--------------
| Format      | Prefix | Example     | Range  |
|-------------|--------|-------------|--------|
| Decimal     | #      | #212        | 0-4095 |
| Hexadecimal | $      | $2A0        | 0-4095 |
| Binary      | %      | %01000010   | 0-255  |

Source is case-insensitive: words, registers, conditions and label
names are all normalized to upper case.

Comments
--------
A semicolon starts a comment that runs to the end of the line.

Example
-------
>>> from chip8_sdk.assembler.lexer import Lexer
>>> lexer = Lexer("mov V0, #1  ; load one", "example.c8a")
>>> for token in lexer.tokenize():
...     print(token)
Token(WORD, 'MOV', 1:1)
Token(REGISTER, 'V0', 1:5)
Token(COMMA, ',', 1:7)
Token(DECIMAL, $1, 1:9)
Token(EOF, 1:23)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import string

from chip8_sdk.cpu import ADDRESS_MAX, BYTE_MAX
from chip8_sdk.errors import (
    ExpectedFoundError,
    SourceLocation,
    UnknownCharacterError,
)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for CHIP-8 assembly language.

    Each token type represents a category of lexical element that can
    appear in assembly source code.
    """

    # Structural tokens
    NEWLINE = auto()    # End of line (statement boundary)
    EOF = auto()        # End of file

    # Words
    WORD = auto()       # Mnemonic or SKIP condition
    REGISTER = auto()   # V0-VF or I

    # Literals
    DECIMAL = auto()    # #123
    HEX = auto()        # $7B
    BINARY = auto()     # %01111011

    # Labels
    LABEL_REF = auto()  # _name
    LABEL_DEF = auto()  # _name:

    # Delimiters
    COMMA = auto()      # ,
    PERIOD = auto()     # .

    def describe(self) -> str:
        """Return the human-readable name used in error messages."""
        return {
            TokenType.NEWLINE: "end of line",
            TokenType.EOF: "end of input",
            TokenType.WORD: "instruction",
            TokenType.REGISTER: "register",
            TokenType.DECIMAL: "decimal literal",
            TokenType.HEX: "hex literal",
            TokenType.BINARY: "binary literal",
            TokenType.LABEL_REF: "label reference",
            TokenType.LABEL_DEF: "label definition",
            TokenType.COMMA: "comma",
            TokenType.PERIOD: "period",
        }[self]


# Token types that carry a numeric value
LITERAL_TYPES = frozenset({TokenType.DECIMAL, TokenType.HEX, TokenType.BINARY})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token from the source code.

    Attributes:
        type: The TokenType classification
        value: The token value (string for words and labels, int for literals)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | None
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        if self.value is not None:
            if isinstance(self.value, int):
                return f"Token({self.type.name}, ${self.value:X}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def describe(self) -> str:
        """
        Describe the token for "expected X, found Y" messages.

        Examples: "register 'V1'", "decimal literal 12", "end of line".
        """
        kind = self.type.describe()
        if self.type in (TokenType.NEWLINE, TokenType.EOF):
            return kind
        if self.type in (TokenType.COMMA, TokenType.PERIOD):
            return f"{kind} '{self.value}'"
        if isinstance(self.value, int):
            return f"{kind} {self.value}"
        return f"{kind} '{self.value}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes CHIP-8 assembly source code.

    The lexer makes a single forward pass over the text and is not
    restartable. The first character that starts no token raises
    UnknownCharacterError.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start a word
    WORD_START = string.ascii_letters

    # Characters that can continue a word
    WORD_CHARS = string.ascii_letters + string.digits

    # Characters that can appear in a label name after the underscore
    LABEL_CHARS = string.ascii_letters + string.digits + "_"

    # Single-character delimiters
    SINGLE_CHAR_TOKENS = {
        ",": TokenType.COMMA,
        ".": TokenType.PERIOD,
    }

    # Separators that carry no meaning
    WHITESPACE = " \t\r\f\v"

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source code to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1

        # Start of the current line, for error context
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects representing each lexical element, ending
            with a single EOF token

        Raises:
            UnknownCharacterError: If a character starts no token
            ExpectedFoundError: If a literal is malformed or out of range
        """
        while not self._at_end():
            if self._skip_whitespace():
                continue

            if self._skip_comment():
                continue

            yield self._scan_token()

        yield self._make_token(TokenType.EOF, None)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """
        Consume and return the current character, advancing position.

        Updates line and column tracking.
        """
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _consume_while(self, allowed: str) -> str:
        """Consume characters while they belong to `allowed`."""
        chars = []
        # Note: Must check for non-empty string first because '' in 'string' is True in Python
        while self._peek() and self._peek() in allowed:
            chars.append(self._advance())
        return "".join(chars)

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | None,
        start_line: Optional[int] = None,
        start_column: Optional[int] = None,
    ) -> Token:
        """
        Create a token with current or specified position.

        Args:
            token_type: The type of token
            value: The token value
            start_line: Override line number (for multi-char tokens)
            start_column: Override column number
        """
        return Token(
            type=token_type,
            value=value,
            line=start_line or self._line,
            column=start_column or self._column,
            filename=self.filename,
        )

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self._line, self._column)

    def get_current_line(self) -> str:
        """
        Get the current line of source text.

        Useful for error reporting.
        """
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end].rstrip("\r")

    def _describe_next(self) -> str:
        """Describe the upcoming character for an ExpectedFound message."""
        char = self._peek()
        if not char:
            return "end of input"
        if char in "\r\n":
            return "end of line"
        return repr(char)

    def _expected(self, expected: str, found: Optional[str] = None) -> ExpectedFoundError:
        return ExpectedFoundError(
            expected,
            found if found is not None else self._describe_next(),
            self._location(),
            source_line=self.get_current_line(),
        )

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace(self) -> bool:
        """
        Skip whitespace characters (space, tab, CR) but not newlines.

        Returns:
            True if any whitespace was skipped
        """
        return bool(self._consume_while(self.WHITESPACE))

    def _skip_comment(self) -> bool:
        """
        Skip a semicolon comment up to (not including) the newline.

        Returns:
            True if a comment was skipped
        """
        if self._peek() != ";":
            return False
        while not self._at_end() and self._peek() != "\n":
            self._advance()
        return True

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        """Scan the next token from source."""
        start_line = self._line
        start_column = self._column

        char = self._peek()

        if char == "\n":
            self._advance()
            return self._make_token(TokenType.NEWLINE, None, start_line, start_column)

        if char in self.WORD_START:
            return self._scan_word(start_line, start_column)

        if char == "_":
            return self._scan_label(start_line, start_column)

        if char == "#":
            return self._scan_number(
                TokenType.DECIMAL, string.digits, 10, ADDRESS_MAX,
                "decimal digits", start_line, start_column,
            )

        if char == "$":
            return self._scan_number(
                TokenType.HEX, string.hexdigits, 16, ADDRESS_MAX,
                "hexadecimal digits", start_line, start_column,
            )

        if char == "%":
            return self._scan_number(
                TokenType.BINARY, "01", 2, BYTE_MAX,
                "binary digits", start_line, start_column,
            )

        if char in self.SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(
                self.SINGLE_CHAR_TOKENS[char],
                char,
                start_line,
                start_column,
            )

        raise UnknownCharacterError(
            char, self._location(), source_line=self.get_current_line()
        )

    def _scan_word(self, start_line: int, start_column: int) -> Token:
        """
        Scan a word and classify it as a register or a plain word.

        `I` and `V` followed by a single hex digit are registers;
        everything else is left for the parser to interpret.
        """
        word = self._consume_while(self.WORD_CHARS).upper()

        if word == "I" or (
            len(word) == 2 and word[0] == "V" and word[1] in string.hexdigits
        ):
            return self._make_token(TokenType.REGISTER, word, start_line, start_column)

        return self._make_token(TokenType.WORD, word, start_line, start_column)

    def _scan_label(self, start_line: int, start_column: int) -> Token:
        """
        Scan a label reference (_name) or definition (_name:).

        The name keeps its leading underscore and is upper-cased.
        """
        self._advance()  # consume _
        name = self._consume_while(self.LABEL_CHARS).upper()
        if not name:
            raise self._expected("label name")

        if self._peek() == ":":
            self._advance()  # consume colon
            return self._make_token(
                TokenType.LABEL_DEF, "_" + name, start_line, start_column
            )

        return self._make_token(TokenType.LABEL_REF, "_" + name, start_line, start_column)

    def _scan_number(
        self,
        token_type: TokenType,
        digits: str,
        base: int,
        maximum: int,
        expected: str,
        start_line: int,
        start_column: int,
    ) -> Token:
        """
        Scan a sigil-prefixed numeric literal.

        Args:
            token_type: DECIMAL, HEX or BINARY
            digits: Characters allowed after the sigil
            base: Numeric base of the digits
            maximum: Largest value the literal may hold
            expected: Description used when no digits follow the sigil
        """
        sigil = self._advance()
        text = self._consume_while(digits)

        if not text:
            raise self._expected(expected)

        value = int(text, base)
        # A binary literal is one byte: at most 8 digits
        too_long = token_type is TokenType.BINARY and len(text) > 8
        if value > maximum or too_long:
            raise ExpectedFoundError(
                f"value in range 0-{maximum}",
                f"{sigil}{text}",
                SourceLocation(self.filename, start_line, start_column),
                source_line=self.get_current_line(),
            )

        return self._make_token(token_type, value, start_line, start_column)
