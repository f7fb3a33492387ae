# =============================================================================
# test_resolver.py - Label Resolver Tests
# =============================================================================
# Tests for the two resolver passes and the label table.
#
# Test coverage includes:
#   - Address assignment from $200
#   - Label definition and duplicate rejection
#   - Forward and backward reference resolution
#   - Unresolved label reporting with suggestions
# =============================================================================

import pytest

from chip8_sdk.assembler.parser import Immediate, parse_source
from chip8_sdk.assembler.resolver import (
    LabelTable,
    ResolverContext,
    assign_addresses,
    resolve_references,
)
from chip8_sdk.errors import (
    BadArgumentError,
    DuplicateLabelError,
    SourceLocation,
    UnresolvedLabelError,
)


def resolve(source: str, context: ResolverContext | None = None):
    """Parse and run both passes; returns (statements, context)."""
    context = context or ResolverContext()
    statements = parse_source(source, "<test>")
    assign_addresses(statements, context)
    resolve_references(statements, context)
    return statements, context


# =============================================================================
# Label Table Tests
# =============================================================================

class TestLabelTable:
    """Test the label table."""

    def test_define_and_lookup(self):
        """Define a label and look it up."""
        table = LabelTable()
        table.define("_a", 0x200, SourceLocation("<test>", 1, 1))
        assert table.lookup("_a") == 0x200
        assert "_a" in table
        assert len(table) == 1

    def test_lookup_missing(self):
        """Unknown label looks up as None."""
        assert LabelTable().lookup("_missing") is None

    def test_duplicate(self):
        """Second definition of a name is rejected."""
        table = LabelTable()
        table.define("_a", 0x200, SourceLocation("<test>", 1, 1))
        with pytest.raises(DuplicateLabelError):
            table.define("_a", 0x204, SourceLocation("<test>", 3, 1))

    def test_names_from_source_are_upper_case(self):
        """Label names reach the table upper-cased."""
        _, context = resolve("_Main_Loop:\nJMP _main_loop")
        assert context.labels.as_dict() == {"_MAIN_LOOP": 0x200}

    def test_find_similar(self):
        """Close misspellings are suggested."""
        table = LabelTable()
        table.define("_loop", 0x200, SourceLocation("<test>", 1, 1))
        table.define("_draw", 0x202, SourceLocation("<test>", 2, 1))
        assert table.find_similar("_lop") == ["_loop"]


# =============================================================================
# Pass 1 Tests
# =============================================================================

class TestAssignAddresses:
    """Test pass 1 address assignment."""

    def test_addresses(self):
        """Addresses start at $200 and advance by statement size."""
        statements = parse_source("_start:\nCLS\n_data:\n%1\n$123\n_end:", "<test>")
        context = ResolverContext()
        assign_addresses(statements, context)

        assert [s.address for s in statements] == [
            0x200, 0x200, 0x202, 0x202, 0x203, 0x205
        ]
        assert context.labels.as_dict() == {
            "_START": 0x200,
            "_DATA": 0x202,
            "_END": 0x205,
        }
        assert context.counter == 0x205

    def test_duplicate_label(self):
        """Duplicate reports both definitions."""
        statements = parse_source("_a:\nCLS\n_a:", "<test>")
        with pytest.raises(DuplicateLabelError) as exc_info:
            assign_addresses(statements, ResolverContext())
        err = exc_info.value
        assert err.name == "_A"
        assert err.line == 3
        assert err.original_location.line == 1


# =============================================================================
# Pass 2 Tests
# =============================================================================

class TestResolveReferences:
    """Test pass 2 reference resolution."""

    def test_forward_reference(self):
        """Reference before definition."""
        statements, _ = resolve("JMP _end\n_end:")
        assert statements[0].operands == [Immediate(0x202)]

    def test_backward_reference(self):
        """Reference after definition."""
        statements, _ = resolve("CLS\n_here:\nJMP _here")
        assert statements[2].operands == [Immediate(0x202)]

    def test_unresolved(self):
        """Undefined label fails on the referencing line."""
        with pytest.raises(UnresolvedLabelError) as exc_info:
            resolve("CLS\nJMP _ghost")
        assert exc_info.value.name == "_GHOST"
        assert exc_info.value.line == 2

    def test_unresolved_suggestion(self):
        """Unresolved label suggests a similar name."""
        with pytest.raises(UnresolvedLabelError) as exc_info:
            resolve("_loop:\nJMP _lop")
        assert exc_info.value.similar_labels == ["_LOOP"]
        assert "did you mean '_LOOP'?" in str(exc_info.value)

    def test_label_case_ignored(self):
        """Labels differing only in case are the same label."""
        statements, _ = resolve("_Loop:\nCLS\nJMP _loop")
        assert statements[2].operands == [Immediate(0x200)]

    def test_address_beyond_twelve_bits(self):
        """Label at $1000 does not fit an address field."""
        context = ResolverContext(origin=0xFFC)
        with pytest.raises(BadArgumentError) as exc_info:
            resolve("CLS\nJMP _end\n_end:", context)
        assert exc_info.value.mnemonic == "JMP"
        assert exc_info.value.line == 2
