# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the CHIP-8 assembler lexer/tokenizer.
#
# Test coverage includes:
#   - Number formats: decimal (#), hexadecimal ($), binary (%)
#   - Words, registers, labels and case normalization
#   - Label references and definitions
#   - Comments and line tracking
#   - Error conditions
# =============================================================================

import pytest

from chip8_sdk.assembler.lexer import Lexer, Token, TokenType
from chip8_sdk.errors import ExpectedFoundError, UnknownCharacterError


# =============================================================================
# Helper Function
# =============================================================================

def tokenize(source: str) -> list:
    """Tokenize and drop the trailing EOF token."""
    lexer = Lexer(source, "<test>")
    return [t for t in lexer.tokenize() if t.type != TokenType.EOF]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source yields no tokens."""
        assert tokenize("") == []

    def test_whitespace_only(self):
        """Whitespace yields no tokens."""
        assert tokenize("   \t   ") == []

    def test_eof_always_last(self):
        """Token stream ends with one EOF."""
        tokens = list(Lexer("CLS", "<test>").tokenize())
        assert tokens[-1].type == TokenType.EOF
        assert len(tokens) == 2

    def test_word_is_uppercased(self):
        """Words are normalized to upper case."""
        tokens = tokenize("mov")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.WORD
        assert tokens[0].value == "MOV"

    def test_word_with_digits(self):
        """Three-character V word is not a register."""
        tokens = tokenize("V10")
        assert tokens[0].type == TokenType.WORD
        assert tokens[0].value == "V10"

    def test_delimiters(self):
        """SKIP suffix and operand separators."""
        tokens = tokenize("SKIP.EQ V0, V1")
        types = [t.type for t in tokens]
        assert types == [
            TokenType.WORD,
            TokenType.PERIOD,
            TokenType.WORD,
            TokenType.REGISTER,
            TokenType.COMMA,
            TokenType.REGISTER,
        ]


class TestRegisters:
    """Test register recognition."""

    @pytest.mark.parametrize("text,expected", [
        ("V0", "V0"),
        ("v1", "V1"),
        ("VA", "VA"),
        ("vf", "VF"),
        ("I", "I"),
        ("i", "I"),
    ])
    def test_register(self, text, expected):
        """Registers in either case."""
        tokens = tokenize(text)
        assert tokens[0].type == TokenType.REGISTER
        assert tokens[0].value == expected

    def test_non_hex_suffix_is_word(self):
        """V followed by a non-hex letter is a word."""
        tokens = tokenize("VG")
        assert tokens[0].type == TokenType.WORD


# =============================================================================
# Number Format Tests
# =============================================================================

class TestNumbers:
    """Test numeric literal scanning."""

    def test_decimal(self):
        """Decimal literal with # prefix."""
        tokens = tokenize("#212")
        assert tokens[0].type == TokenType.DECIMAL
        assert tokens[0].value == 212

    def test_hex(self):
        """Hex literal with $ prefix."""
        tokens = tokenize("$2a0")
        assert tokens[0].type == TokenType.HEX
        assert tokens[0].value == 0x2A0

    def test_binary(self):
        """Binary literal with % prefix."""
        tokens = tokenize("%01000010")
        assert tokens[0].type == TokenType.BINARY
        assert tokens[0].value == 0x42

    def test_decimal_maximum(self):
        """Largest 12-bit decimal value."""
        assert tokenize("#4095")[0].value == 4095

    def test_leading_zeros_allowed(self):
        """Leading zeros do not count against the range."""
        assert tokenize("#0004095")[0].value == 4095

    def test_decimal_out_of_range(self):
        """Decimal above 4095 is rejected."""
        with pytest.raises(ExpectedFoundError) as exc_info:
            tokenize("#4096")
        assert exc_info.value.found == "#4096"
        assert exc_info.value.expected == "value in range 0-4095"

    def test_hex_out_of_range(self):
        """Hex above $FFF is rejected."""
        with pytest.raises(ExpectedFoundError):
            tokenize("$1000")

    def test_binary_too_many_digits(self):
        """Binary literal longer than 8 digits is rejected."""
        with pytest.raises(ExpectedFoundError):
            tokenize("%000000001")

    def test_sigil_without_digits(self):
        """Prefix with nothing after it."""
        with pytest.raises(ExpectedFoundError) as exc_info:
            tokenize("#")
        assert exc_info.value.expected == "decimal digits"
        assert exc_info.value.found == "end of input"

    def test_hex_sigil_followed_by_comma(self):
        """Prefix followed by a delimiter."""
        with pytest.raises(ExpectedFoundError) as exc_info:
            tokenize("$,")
        assert exc_info.value.expected == "hexadecimal digits"
        assert exc_info.value.found == "','"


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label reference and definition scanning."""

    def test_label_reference(self):
        """Label reference is upper-cased."""
        tokens = tokenize("_loop")
        assert tokens[0].type == TokenType.LABEL_REF
        assert tokens[0].value == "_LOOP"

    def test_label_definition(self):
        """Colon is consumed into the definition."""
        tokens = tokenize("_Main_Loop:")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.LABEL_DEF
        assert tokens[0].value == "_MAIN_LOOP"

    def test_bare_underscore(self):
        """Underscore needs a name."""
        with pytest.raises(ExpectedFoundError) as exc_info:
            tokenize("_ ")
        assert exc_info.value.expected == "label name"


# =============================================================================
# Comments and Position Tracking
# =============================================================================

class TestCommentsAndLines:
    """Test comment skipping and line/column tracking."""

    def test_comment_skipped(self):
        """Comment after an instruction."""
        tokens = tokenize("CLS ; clear the screen")
        assert len(tokens) == 1
        assert tokens[0].value == "CLS"

    def test_comment_only_line(self):
        """Line holding only a comment."""
        tokens = tokenize("; nothing here")
        assert tokens == []

    def test_newline_tokens(self):
        """Line ends produce NEWLINE tokens."""
        tokens = tokenize("CLS\nRET")
        assert [t.type for t in tokens] == [
            TokenType.WORD, TokenType.NEWLINE, TokenType.WORD
        ]

    def test_line_and_column(self):
        """Positions are 1-indexed."""
        tokens = tokenize("CLS\n  RET")
        ret = tokens[-1]
        assert ret.line == 2
        assert ret.column == 3

    def test_token_location(self):
        """Token location formats as file:line:col."""
        token = tokenize("CLS")[0]
        assert str(token.location) == "<test>:1:1"


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Test lexer error reporting."""

    def test_unknown_character(self):
        """Character that starts no token."""
        with pytest.raises(UnknownCharacterError) as exc_info:
            tokenize("MOV V1, @")
        err = exc_info.value
        assert err.char == "@"
        assert err.line == 1
        assert err.location.column == 9

    def test_unknown_character_message(self):
        """Error message shows location and source line."""
        with pytest.raises(UnknownCharacterError) as exc_info:
            tokenize("CLS\nMOV V1, @")
        message = str(exc_info.value)
        assert message.startswith("<test>:2:9: error: unknown character '@'")
        assert "MOV V1, @" in message


class TestTokenDescribe:
    """Test token descriptions used in error messages."""

    @pytest.mark.parametrize("token_type,value,expected", [
        (TokenType.REGISTER, "V1", "register 'V1'"),
        (TokenType.DECIMAL, 12, "decimal literal 12"),
        (TokenType.COMMA, ",", "comma ','"),
        (TokenType.NEWLINE, None, "end of line"),
        (TokenType.LABEL_REF, "_x", "label reference '_x'"),
    ])
    def test_describe(self, token_type, value, expected):
        """Describe tokens for expected/found messages."""
        token = Token(token_type, value, 1, 1, "<test>")
        assert token.describe() == expected
