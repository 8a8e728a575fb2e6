"""
Unit tests for the SOSI line tokenizer

Tests cover:
1. Levels and keywords
2. Continuation lines
3. Inline statements
4. Blank lines and comments
5. End marker
"""

from sosi.streaming.tokenizer import parse_statement, split_statements, tokenize_lines


def _lines(text):
    """Build (line_number, offset, text) tuples the way iter_decoded_lines does."""
    offset = 0
    result = []
    for number, line in enumerate(text.split("\n"), 1):
        result.append((number, offset, line))
        offset += len(line.encode("utf-8")) + 1
    return result


def _tokens(text):
    return [(s.level, s.keyword, s.value, s.continuation) for s in tokenize_lines(_lines(text))]


# ============================================================================
# Statement Parsing Tests
# ============================================================================

def test_parse_statement_levels():
    assert parse_statement(".KURVE 12:").level == 1
    assert parse_statement("..NØ").level == 2
    statement = parse_statement("...KOORDSYS 23 ")
    assert (statement.level, statement.keyword, statement.value) == (3, "KOORDSYS", "23")


def test_parse_statement_without_keyword():
    statement = parse_statement("..")
    assert statement.keyword == ""
    assert statement.value == ""


def test_split_statements_respects_quotes():
    assert split_statements('..STRENG "Bak ..KIRKA" ..SPRÅK nor') == [
        '..STRENG "Bak ..KIRKA"',
        "..SPRÅK nor",
    ]


def test_split_statements_keeps_dotted_values():
    assert split_statements("..GATENAVN St. Olavs plass") == ["..GATENAVN St. Olavs plass"]


# ============================================================================
# Tokenizer Tests
# ============================================================================

def test_tokenize_continuation_lines():
    text = ".KURVE 12:\n..NØ\n664500000 25300000\n664510000 25310000\n.SLUTT"
    assert _tokens(text) == [
        (1, "KURVE", "12:", []),
        (2, "NØ", "", ["664500000 25300000", "664510000 25310000"]),
        (1, "SLUTT", "", []),
    ]


def test_tokenize_inline_kp_does_not_steal_continuation():
    text = "..NØ\n1 2 ...KP 1\n3 4\n..OBJTYPE Veg"
    tokens = _tokens(text)
    assert tokens[0] == (2, "NØ", "", ["1 2", "3 4"])
    assert tokens[1] == (3, "KP", "1", [])
    assert tokens[2] == (2, "OBJTYPE", "Veg", [])


def test_tokenize_skips_blank_and_comment_lines():
    text = ".HODE\n\n   \n! a comment line\n..TEGNSETT UTF-8\n"
    assert _tokens(text) == [
        (1, "HODE", "", []),
        (2, "TEGNSETT", "UTF-8", []),
    ]


def test_tokenize_keeps_inline_comment_marker():
    text = '..GATENAVN "Hans Hanssens vei !nocomment"'
    assert _tokens(text) == [(2, "GATENAVN", '"Hans Hanssens vei !nocomment"', [])]


def test_tokenize_stops_at_slutt():
    text = ".PUNKT 1:\n.SLUTT\n.PUNKT 2:\n"
    assert [t[1] for t in _tokens(text)] == ["PUNKT", "SLUTT"]


def test_tokenize_ignores_data_before_first_statement():
    assert _tokens("stray data\n.HODE") == [(1, "HODE", "", [])]


def test_tokenize_records_line_numbers_and_offsets():
    statements = list(tokenize_lines(_lines(".HODE\n..ENHET 0.01\n.SLUTT")))
    assert [(s.line_number, s.offset) for s in statements] == [(1, 0), (2, 6), (3, 19)]


def test_split_statements_keeps_single_dot_values():
    assert split_statements("..MERKNAD se .Vedlegg 3") == ["..MERKNAD se .Vedlegg 3"]
    assert split_statements("..MERKNAD se .Vedlegg 3 ..KOMM 0219") == [
        "..MERKNAD se .Vedlegg 3",
        "..KOMM 0219",
    ]


def test_tokenize_single_dot_value_does_not_open_a_group():
    text = ".PUNKT 1:\n..MERKNAD se .Vedlegg 3\n..NØ\n10 20"
    assert _tokens(text) == [
        (1, "PUNKT", "1:", []),
        (2, "MERKNAD", "se .Vedlegg 3", []),
        (2, "NØ", "", ["10 20"]),
    ]
