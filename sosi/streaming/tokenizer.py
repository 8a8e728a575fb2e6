"""
Line tokenizer for the SOSI statement grammar.

Turns decoded physical lines into logical statements:

- A statement starts with one or more level markers (``.``, ``..``, ``...``)
  followed by a keyword and an optional value.
- A physical line without a leading level marker continues the most recent
  statement that started a line (coordinate lines, wrapped reference lists,
  wrapped attribute values).
- Several statements may share a physical line (``664591976 25367399 ...KP 1``);
  a new statement starts at whitespace followed by two or more dots and a
  letter, outside double quotes. Level-1 statements only start a physical line,
  so a single dot inside a value is data.
- Blank lines and lines starting with the comment marker are skipped. A comment
  marker inside a value is data and is kept verbatim.
- Tokenizing stops after the ``.SLUTT`` statement.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from ..core.constants import COMMENT_MARKER, END_KEYWORD, LEVEL_MARKER
from ..core.types import Statement
from ..utils.logging import make_debug_logger

_log = make_debug_logger("[TOKENIZE]")


def _starts_keyword(text: str, index: int) -> bool:
    """True if two or more level markers starting at ``index`` are followed by a letter."""
    end = index
    while end < len(text) and text[end] == LEVEL_MARKER:
        end += 1
    return end - index >= 2 and end < len(text) and text[end].isalpha()


def split_statements(text: str) -> List[str]:
    """
    Split one physical line into statement segments.

    Args:
        text: Stripped physical line

    Returns:
        Segments in line order; only the first may lack a level marker

    Examples:
        >>> split_statements("664591976 25367399 ...KP 1")
        ['664591976 25367399', '...KP 1']
        >>> split_statements('..GATENAVN "Storgata ..X" ..HUSNR 4')
        ['..GATENAVN "Storgata ..X"', '..HUSNR 4']
    """
    segments = []
    start = 0
    quoted = False
    for index, char in enumerate(text):
        if char == '"':
            quoted = not quoted
        elif (
            char == LEVEL_MARKER
            and not quoted
            and index > start
            and text[index - 1].isspace()
            and _starts_keyword(text, index)
        ):
            segments.append(text[start:index].rstrip())
            start = index
    segments.append(text[start:].rstrip())
    return [segment for segment in segments if segment]


def parse_statement(segment: str, line_number: int = 0, offset: int = 0) -> Statement:
    """
    Parse a segment that starts with level markers into a Statement.

    Example:
        >>> parse_statement(".KURVE 12:").keyword
        'KURVE'
    """
    level = len(segment) - len(segment.lstrip(LEVEL_MARKER))
    parts = segment[level:].split(None, 1)
    keyword = parts[0] if parts else ""
    value = parts[1].strip() if len(parts) > 1 else ""
    return Statement(
        level=level,
        keyword=keyword,
        value=value,
        line_number=line_number,
        offset=offset,
    )


def tokenize_lines(
    lines: Iterable[Tuple[int, int, str]],
    debug: bool = False,
) -> Iterator[Statement]:
    """
    Yield logical statements from decoded physical lines.

    A statement is yielded once the next line-starting statement arrives, so its
    continuation lines are complete.

    Args:
        lines: Iterable of (line_number, byte_offset, text)
        debug: Enable debug logging

    Yields:
        Statement objects in file order, ending with ``.SLUTT`` when present
    """
    pending: Optional[Statement] = None
    inline: List[Statement] = []

    for line_number, offset, text in lines:
        stripped = text.strip()
        if not stripped or stripped.startswith(COMMENT_MARKER):
            continue

        segments = split_statements(stripped)
        head, rest = segments[0], segments[1:]

        if head.startswith(LEVEL_MARKER):
            if pending is not None:
                yield pending
                yield from inline
            pending = parse_statement(head, line_number, offset)
            inline = []
            if pending.level == 1 and pending.keyword == END_KEYWORD:
                yield pending
                return
        elif pending is None:
            _log(f"Line {line_number}: data before first statement ignored", debug)
            continue
        else:
            pending.continuation.append(head)

        for segment in rest:
            inline.append(parse_statement(segment, line_number, offset))

    if pending is not None:
        yield pending
        yield from inline
