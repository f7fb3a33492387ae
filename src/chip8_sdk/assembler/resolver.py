"""
CHIP-8 Label Resolver
=====================

Two-pass label resolution for parsed statements.

Pass 1 (assign_addresses)
-------------------------
- Walk statements in order with the counter at the load address
- Record each statement's address
- Enter every label definition into the label table
- Advance the counter by each statement's size

Pass 2 (resolve_references)
---------------------------
- Look up every label reference in the completed table
- Replace the reference with an Immediate holding the address
- Check the resolved address still fits a 12-bit field

Because pass 1 completes before pass 2 starts, forward and backward
references resolve identically.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from chip8_sdk.errors import (
    BadArgumentError,
    DuplicateLabelError,
    SourceLocation,
    UnresolvedLabelError,
)
from chip8_sdk.assembler.parser import (
    Immediate,
    Instruction,
    LabelDef,
    LabelRef,
    Statement,
)
from chip8_sdk.cpu import ADDRESS_MAX, PROGRAM_START

logger = logging.getLogger(__name__)


# =============================================================================
# Label Table
# =============================================================================

@dataclass
class Label:
    """
    Label table entry.

    Attributes:
        name: Label name including the leading underscore
        address: Address of the byte following the definition
        location: Where the label was defined
    """
    name: str
    address: int
    location: SourceLocation


class LabelTable:
    """
    Mapping of label names to addresses.

    Names are matched exactly. A name can be defined only once.
    """

    def __init__(self):
        self._labels: dict[str, Label] = {}

    def define(
        self,
        name: str,
        address: int,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> Label:
        """
        Add a label to the table.

        Raises:
            DuplicateLabelError: If the name is already defined
        """
        existing = self._labels.get(name)
        if existing is not None:
            raise DuplicateLabelError(
                name,
                location=location,
                original_location=existing.location,
                source_line=source_line,
            )

        label = Label(name, address, location)
        self._labels[name] = label
        return label

    def lookup(self, name: str) -> Optional[int]:
        """Return the address of a label, or None if undefined."""
        label = self._labels.get(name)
        return label.address if label else None

    def find_similar(self, name: str) -> list[str]:
        """
        Find defined labels with similar names for error hints.

        Uses a simple edit distance heuristic.
        """
        name_lower = name.lower()
        similar = []

        for candidate in self._labels:
            candidate_lower = candidate.lower()
            if (
                candidate_lower == name_lower or
                abs(len(candidate) - len(name)) <= 1 and
                _edit_distance(name_lower, candidate_lower) <= 2
            ):
                similar.append(candidate)

        return similar[:3]

    def items(self) -> Iterator[tuple[str, int]]:
        """Iterate (name, address) pairs in definition order."""
        for name, label in self._labels.items():
            yield name, label.address

    def as_dict(self) -> dict[str, int]:
        return {name: label.address for name, label in self._labels.items()}

    def __contains__(self, name: str) -> bool:
        return name in self._labels

    def __len__(self) -> int:
        return len(self._labels)


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(
                    1 + min(distances[j], distances[j + 1], new_distances[-1])
                )
        distances = new_distances
    return distances[-1]


# =============================================================================
# Resolver Context
# =============================================================================

@dataclass
class ResolverContext:
    """
    Per-run resolver state.

    Attributes:
        origin: Load address of the first statement
        counter: Address of the next byte to be emitted
        labels: Label table filled during pass 1
        source_lines: Source text lines, used for error context
    """
    origin: int = PROGRAM_START
    counter: int = PROGRAM_START
    labels: LabelTable = field(default_factory=LabelTable)
    source_lines: list[str] = field(default_factory=list)

    def source_line(self, line: int) -> Optional[str]:
        if 1 <= line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None


# =============================================================================
# Pass 1: Address Assignment
# =============================================================================

def assign_addresses(statements: list[Statement], context: ResolverContext) -> None:
    """
    First pass: fix the address of every statement and build the label table.

    Args:
        statements: Parsed statements in source order
        context: Resolver state; its counter is reset to the origin

    Raises:
        DuplicateLabelError: If a label is defined twice
    """
    context.counter = context.origin

    for stmt in statements:
        stmt.address = context.counter

        if isinstance(stmt, LabelDef):
            context.labels.define(
                stmt.name,
                context.counter,
                stmt.location,
                source_line=context.source_line(stmt.location.line),
            )
            logger.debug("label %s = $%04X", stmt.name, context.counter)

        context.counter += stmt.size


# =============================================================================
# Pass 2: Reference Resolution
# =============================================================================

def resolve_references(statements: list[Statement], context: ResolverContext) -> None:
    """
    Second pass: replace every label reference with its address.

    Must run after assign_addresses() on the same context.

    Raises:
        UnresolvedLabelError: If a referenced label is never defined
        BadArgumentError: If a label's address does not fit 12 bits
    """
    for stmt in statements:
        if isinstance(stmt, Instruction):
            resolve_instruction(stmt, context)


def resolve_instruction(inst: Instruction, context: ResolverContext) -> None:
    """Resolve the label references of a single instruction in place."""
    source_line = context.source_line(inst.location.line)

    for i, operand in enumerate(inst.operands):
        if not isinstance(operand, LabelRef):
            continue

        address = context.labels.lookup(operand.name)
        if address is None:
            raise UnresolvedLabelError(
                operand.name,
                location=inst.location,
                source_line=source_line,
                similar_labels=context.labels.find_similar(operand.name),
            )

        # Only a label after the last byte of a full image lands here
        if address > ADDRESS_MAX:
            raise BadArgumentError(
                inst.name,
                location=inst.location,
                source_line=source_line,
            )

        inst.operands[i] = Immediate(address)
