"""
Group builder: folds statements into RawGroup objects.

Every level-1 statement opens a group; deeper statements are attached to it:

- ``..NØ`` / ``..NØH`` / ``..NØD`` → raw coordinate tuples
- ``..REF`` → signed ring references
- ``...KP`` → node marker, dropped
- anything else with a value → flattened attribute

Malformed coordinate lines and reference tokens are skipped and recorded as
warnings on the group; they never stop the stream.
"""

import re
from typing import Iterable, Iterator, Optional

from ..core.constants import (
    COORDINATE_KEYWORDS,
    END_KEYWORD,
    GEOMETRY_MARKER_KEYWORDS,
    HEADER_KEYWORD,
    OBJECT_KEYWORDS,
    REFERENCE_KEYWORD,
)
from ..core.types import GroupKind, RawGroup, Statement
from ..parsers.references import parse_ring_references
from ..utils.logging import make_debug_logger

_log = make_debug_logger("[GROUPS]")

_LOCAL_ID = re.compile(r"^(-?\d+)\s*:?")


def classify_keyword(keyword: str) -> GroupKind:
    """
    Map a level-1 keyword to its group kind.

    Examples:
        >>> classify_keyword("FLATE")
        <GroupKind.POLYGON: 'POLYGON'>
        >>> classify_keyword("SVERM")
        <GroupKind.UNCLASSIFIED: 'UNCLASSIFIED'>
    """
    if keyword == HEADER_KEYWORD:
        return GroupKind.HEADER
    kind = OBJECT_KEYWORDS.get(keyword)
    return GroupKind[kind] if kind else GroupKind.UNCLASSIFIED


def parse_local_id(value: str) -> Optional[int]:
    """Return the serial number of ``.KURVE 12:`` style values, or None."""
    match = _LOCAL_ID.match(value)
    return int(match.group(1)) if match else None


def clean_value(text: str) -> str:
    """
    Strip the quotes of a value that is a single quoted string.

    The content of a quoted string is returned verbatim; any other value has its
    internal whitespace collapsed to single spaces.

    Examples:
        >>> clean_value('"Hans  Hanssens vei !nocomment"')
        'Hans  Hanssens vei !nocomment'
        >>> clean_value('1367   "SNARØYA"')
        '1367 "SNARØYA"'
    """
    if len(text) >= 2 and text[0] in "\"'" and text[-1] == text[0]:
        inner = text[1:-1]
        if text[0] not in inner:
            return inner
    return " ".join(text.split())


def _add_coordinates(group: RawGroup, statement: Statement) -> None:
    for line in statement.lines():
        tokens = line.split()
        if len(tokens) not in (2, 3):
            group.warnings.append(
                f"Line {statement.line_number}: malformed coordinate line {line!r}"
            )
            continue
        try:
            values = [int(token) for token in tokens]
        except ValueError:
            group.warnings.append(
                f"Line {statement.line_number}: non-integer coordinate line {line!r}"
            )
            continue
        # File order is north, east[, height]
        north, east = values[0], values[1]
        group.coordinates.append((east, north, *values[2:]))


def _add_references(group: RawGroup, statement: Statement) -> None:
    rings, warnings = parse_ring_references(statement.lines())
    group.warnings.extend(f"Line {statement.line_number}: {w}" for w in warnings)
    if not group.rings:
        group.rings = rings
        return
    # A second REF statement continues the outer ring and adds its holes
    group.rings[0].extend(rings[0])
    group.rings.extend(rings[1:])


def add_statement(group: RawGroup, statement: Statement) -> None:
    """
    Attach a level ≥2 statement to ``group``.

    Args:
        group: Group being built
        statement: Statement nested below the group's opening statement
    """
    keyword = statement.keyword
    if not keyword:
        group.warnings.append(f"Line {statement.line_number}: statement without keyword")
        return

    if group.kind is not GroupKind.HEADER:
        if keyword in COORDINATE_KEYWORDS:
            _add_coordinates(group, statement)
            return
        if keyword == REFERENCE_KEYWORD:
            _add_references(group, statement)
            return
        if keyword in GEOMETRY_MARKER_KEYWORDS:
            return

    value = clean_value(statement.text())
    if value or statement.text():
        group.attributes[keyword] = value


def start_group(statement: Statement) -> RawGroup:
    """Open a group for a level-1 statement."""
    return RawGroup(
        level=statement.level,
        keyword=statement.keyword,
        kind=classify_keyword(statement.keyword),
        local_id=parse_local_id(statement.value),
        line_number=statement.line_number,
        start_offset=statement.offset,
    )


def finish_group(group: RawGroup) -> RawGroup:
    """Apply the classification rules that need the complete group."""
    if group.kind is GroupKind.CURVE and not group.attributes:
        group.kind = GroupKind.REFERENCE_ONLY
    return group


def build_groups(statements: Iterable[Statement], debug: bool = False) -> Iterator[RawGroup]:
    """
    Fold a statement sequence into groups.

    Args:
        statements: Statements in file order (see tokenizer.tokenize_lines)
        debug: Enable debug logging

    Yields:
        Completed RawGroup objects in file order, header first
    """
    current: Optional[RawGroup] = None

    for statement in statements:
        if statement.level == 1:
            if current is not None:
                current.end_offset = statement.offset
                yield finish_group(current)
                current = None
            if statement.keyword == END_KEYWORD:
                _log(f"End marker at line {statement.line_number}", debug)
                return
            current = start_group(statement)
            continue

        if current is None:
            _log(f"Line {statement.line_number}: statement outside any group ignored", debug)
            continue

        add_statement(current, statement)

    if current is not None:
        _log("Input ended without .SLUTT", debug)
        yield finish_group(current)
