"""
CHIP-8 Assembly Language Parser
===============================

This module implements the instruction builder for CHIP-8 assembly. It
groups the lexer's tokens into one statement per source line and checks
every instruction's operands against the instruction set's form table.

Statement Types
---------------
1. **LabelDef**: Label definition, no runtime effect, size 0
   ```asm
   _loop:
   ```

2. **Instruction**: Machine instruction with operands, size 2
   ```asm
   MOV V0, #1
   SKIP.NE V0, V1
   DRAW V0, V1, #5
   ```

3. **Literal**: Raw data, size 2 for decimal/hex and 1 for binary
   ```asm
   $0F0F
   %01000010
   ```

Operand Classes
---------------
| Syntax       | Operand        |
|--------------|----------------|
| V0 .. VF     | Register       |
| I            | IndexRegister  |
| #n, $n, %n   | Immediate      |
| _name        | LabelRef       |

Each line holds exactly one statement; a label definition stands on its
own line and consecutive literals go on separate lines.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from chip8_sdk.errors import (
    BadArgumentError,
    BadSkipTypeError,
    ExpectedFoundError,
    SourceLocation,
    UnknownInstructionError,
)
from chip8_sdk.assembler.lexer import LITERAL_TYPES, Lexer, Token, TokenType
from chip8_sdk.cpu import (
    ADDRESS_MAX,
    BYTE_MAX,
    INSTRUCTION_SIZE,
    NIBBLE_MAX,
    SKIP_CONDITIONS,
    InstructionForm,
    Mnemonic,
    OperandKind,
    SkipCondition,
    format_mnemonic,
    get_forms,
    is_valid_mnemonic,
)


# =============================================================================
# Operands
# =============================================================================

@dataclass(frozen=True)
class Register:
    """General purpose register V0-VF."""
    index: int

    def __str__(self) -> str:
        return f"V{self.index:X}"


@dataclass(frozen=True)
class IndexRegister:
    """The 12-bit index register I."""

    def __str__(self) -> str:
        return "I"


@dataclass(frozen=True)
class Immediate:
    """Numeric operand; its value decides which field widths it fits."""
    value: int

    def __str__(self) -> str:
        return f"${self.value:X}"


@dataclass(frozen=True)
class LabelRef:
    """Reference to a label, replaced by its address during resolution."""
    name: str

    def __str__(self) -> str:
        return self.name


Operand = Union[Register, IndexRegister, Immediate, LabelRef]


def operand_matches(operand: Operand, kind: OperandKind) -> bool:
    """
    Check whether a parsed operand satisfies an operand kind.

    Labels are always 12-bit addresses; their value is checked once
    the label table is complete.
    """
    if kind is OperandKind.REGISTER:
        return isinstance(operand, Register)
    if kind is OperandKind.INDEX:
        return isinstance(operand, IndexRegister)
    if kind is OperandKind.ADDRESS:
        if isinstance(operand, LabelRef):
            return True
        return isinstance(operand, Immediate) and operand.value <= ADDRESS_MAX
    if kind is OperandKind.BYTE:
        return isinstance(operand, Immediate) and operand.value <= BYTE_MAX
    if kind is OperandKind.NIBBLE:
        return isinstance(operand, Immediate) and operand.value <= NIBBLE_MAX
    return False


def match_form(
    forms: tuple[InstructionForm, ...],
    operands: list[Operand],
) -> Optional[InstructionForm]:
    """
    Find the form whose operand signature fits the operand list.

    Returns:
        The matching form, or None if no form accepts the operands
    """
    for form in forms:
        if len(form.operands) != len(operands):
            continue
        if all(operand_matches(op, kind) for op, kind in zip(operands, form.operands)):
            return form
    return None


# =============================================================================
# Statement Data Classes
# =============================================================================

@dataclass
class Statement:
    """
    Base class for all parsed statements.

    Every statement has a source location for error reporting.
    Subclasses carry an `address`, assigned by the first resolver pass.
    """
    location: SourceLocation

    @property
    def size(self) -> int:
        """Number of bytes this statement emits."""
        return 0


@dataclass
class LabelDef(Statement):
    """
    Label definition statement.

    Attributes:
        name: Label name including the leading underscore
        address: Address of the next emitted byte (set in pass 1)
    """
    name: str
    address: Optional[int] = None


@dataclass
class Instruction(Statement):
    """
    Machine instruction statement.

    Attributes:
        mnemonic: The instruction mnemonic
        operands: Operands in source order
        condition: SKIP condition (SKIP only)
        form: The form the operands matched
        address: Address of the instruction (set in pass 1)
    """
    mnemonic: Mnemonic
    operands: list[Operand] = field(default_factory=list)
    condition: Optional[SkipCondition] = None
    form: Optional[InstructionForm] = None
    address: Optional[int] = None

    @property
    def size(self) -> int:
        return INSTRUCTION_SIZE

    @property
    def name(self) -> str:
        """Source spelling of the instruction, e.g. 'SKIP.EQ'."""
        return format_mnemonic(self.mnemonic, self.condition)

    def __str__(self) -> str:
        if not self.operands:
            return self.name
        return f"{self.name} {', '.join(str(op) for op in self.operands)}"


@dataclass
class Literal(Statement):
    """
    Raw data statement.

    Attributes:
        value: The literal value
        width: Emitted size in bytes (2 for decimal/hex, 1 for binary)
        address: Address of the first byte (set in pass 1)
    """
    value: int
    width: int = 2
    address: Optional[int] = None

    @property
    def size(self) -> int:
        return self.width


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Parses CHIP-8 assembly tokens into statements.

    Usage:
        lexer = Lexer(source, filename)
        tokens = list(lexer.tokenize())
        parser = Parser(tokens, filename, source)
        statements = parser.parse()
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source: Optional[str] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from lexer
            filename: Source filename for error reporting
            source: Original source text, used to show context in errors
        """
        self._tokens = tokens
        self._filename = filename
        self._lines = source.splitlines() if source else []
        self._pos = 0

    def parse(self) -> list[Statement]:
        """
        Parse all tokens into statements.

        Returns:
            List of Statement objects in source order

        Raises:
            AssemblySyntaxError: If the tokens don't form valid statements
            BadArgumentError: If an instruction's operands don't fit
        """
        statements: list[Statement] = []

        while not self._at_end():
            # Skip blank lines
            if self._match(TokenType.NEWLINE):
                continue

            statements.append(self._parse_line())

        return statements

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if at end of token stream."""
        return self._pos >= len(self._tokens) or self._current().type == TokenType.EOF

    def _current(self) -> Token:
        """Get current token."""
        if self._pos >= len(self._tokens):
            last = self._tokens[-1] if self._tokens else None
            return Token(
                TokenType.EOF, None,
                last.line if last else 1,
                last.column if last else 1,
                last.filename if last else self._filename,
            )
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        """Check if current token is one of the given types."""
        return self._current().type in types

    def _match(self, *types: TokenType) -> Optional[Token]:
        """Match and consume if current token is one of the types."""
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        """Expect specific token type, raise ExpectedFoundError if not found."""
        if not self._check(token_type):
            raise self._expected(expected)
        return self._advance()

    def _source_line(self, line: int) -> Optional[str]:
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        return None

    def _expected(self, expected: str) -> ExpectedFoundError:
        tok = self._current()
        return ExpectedFoundError(
            expected,
            tok.describe(),
            tok.location,
            source_line=self._source_line(tok.line),
        )

    # =========================================================================
    # Line Parsing
    # =========================================================================

    def _parse_line(self) -> Statement:
        """Parse the single statement on the current line."""
        tok = self._current()

        if tok.type == TokenType.LABEL_DEF:
            self._advance()
            statement: Statement = LabelDef(location=tok.location, name=tok.value)
        elif tok.type in LITERAL_TYPES:
            statement = self._parse_literal()
        elif tok.type == TokenType.WORD:
            statement = self._parse_instruction()
        elif tok.type == TokenType.LABEL_REF:
            # Label word without its colon
            raise self._expected("label definition")
        else:
            raise self._expected("instruction")

        if not self._check(TokenType.EOF):
            self._expect(TokenType.NEWLINE, "end of line")

        return statement

    def _parse_literal(self) -> Literal:
        """Parse a raw data literal."""
        tok = self._advance()
        width = 1 if tok.type == TokenType.BINARY else 2
        return Literal(location=tok.location, value=tok.value, width=width)

    # =========================================================================
    # Instruction Parsing
    # =========================================================================

    def _parse_instruction(self) -> Instruction:
        """Parse a machine instruction and validate its operands."""
        mnemonic_token = self._advance()
        name = mnemonic_token.value
        location = mnemonic_token.location

        if not is_valid_mnemonic(name):
            raise UnknownInstructionError(
                name, location, source_line=self._source_line(location.line)
            )

        mnemonic = Mnemonic(name)
        condition = None
        if mnemonic is Mnemonic.SKIP:
            condition = self._parse_skip_condition()

        operands = self._parse_operands()

        forms = get_forms(mnemonic, condition)
        form = match_form(forms, operands)
        if form is None:
            raise BadArgumentError(
                format_mnemonic(mnemonic, condition),
                location,
                source_line=self._source_line(location.line),
                valid_forms=[f.describe() for f in forms],
            )

        return Instruction(
            location=location,
            mnemonic=mnemonic,
            operands=operands,
            condition=condition,
            form=form,
        )

    def _parse_skip_condition(self) -> SkipCondition:
        """Parse the '.COND' suffix that follows SKIP."""
        self._expect(TokenType.PERIOD, "period")

        # A register-shaped suffix (VE, I) is still a bad skip type
        if not self._check(TokenType.WORD, TokenType.REGISTER):
            raise self._expected("skip condition")

        tok = self._advance()
        if tok.value not in SKIP_CONDITIONS:
            raise BadSkipTypeError(
                tok.value, tok.location, source_line=self._source_line(tok.line)
            )
        return SkipCondition(tok.value)

    def _parse_operands(self) -> list[Operand]:
        """Parse a comma separated operand list up to end of line."""
        operands: list[Operand] = []
        if self._check(TokenType.NEWLINE, TokenType.EOF):
            return operands

        operands.append(self._parse_operand())
        while not self._check(TokenType.NEWLINE, TokenType.EOF):
            self._expect(TokenType.COMMA, "comma")
            operands.append(self._parse_operand())

        return operands

    def _parse_operand(self) -> Operand:
        """Parse a single operand."""
        tok = self._current()

        if tok.type == TokenType.REGISTER:
            self._advance()
            if tok.value == "I":
                return IndexRegister()
            return Register(int(tok.value[1], 16))

        if tok.type in LITERAL_TYPES:
            self._advance()
            return Immediate(tok.value)

        if tok.type == TokenType.LABEL_REF:
            self._advance()
            return LabelRef(tok.value)

        raise self._expected("operand")


# =============================================================================
# Convenience Function
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> list[Statement]:
    """
    Tokenize and parse source code in one step.

    Args:
        source: Assembly source code
        filename: Source filename for error messages

    Returns:
        List of parsed statements
    """
    tokens = list(Lexer(source, filename).tokenize())
    return Parser(tokens, filename, source).parse()
