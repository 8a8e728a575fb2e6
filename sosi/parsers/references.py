"""
Parsing of ``..REF`` ring references.

A reference list names previously declared curves by local id. The sign gives the
traversal direction and parentheses enclose the rings of holes::

    ..REF :12 :-45 (:3 :4) (:-7)

gives an outer ring ``[12, -45]`` and two holes ``[3, 4]`` and ``[-7]``.
"""

import re
from typing import List, Tuple

_REF_TOKEN = re.compile(r"\(|\)|\S+")


def parse_ring_references(lines: List[str]) -> Tuple[List[List[int]], List[str]]:
    """
    Parse reference lines into rings of signed curve ids.

    Args:
        lines: Value line and continuation lines of a REF statement

    Returns:
        Tuple of (rings, warnings):
        - rings: Outer ring first (possibly empty), then one list per hole
        - warnings: Messages for tokens that were skipped

    Examples:
        >>> parse_ring_references([":12 :-45", "(:3 :4)"])
        ([[12, -45], [3, 4]], [])
        >>> parse_ring_references([":1 :x"])
        ([[1]], ["Skipped reference token ':x'"])
    """
    rings: List[List[int]] = [[]]
    warnings: List[str] = []
    in_hole = False

    for line in lines:
        for token in _REF_TOKEN.findall(line.replace("(", " ( ").replace(")", " ) ")):
            if token == "(":
                if in_hole:
                    warnings.append("Nested '(' in reference list")
                rings.append([])
                in_hole = True
            elif token == ")":
                if not in_hole:
                    warnings.append("Unbalanced ')' in reference list")
                in_hole = False
            else:
                try:
                    reference = int(token.lstrip(":"))
                except ValueError:
                    warnings.append(f"Skipped reference token {token!r}")
                    continue
                if reference == 0:
                    warnings.append("Skipped reference to id 0")
                    continue
                (rings[-1] if in_hole else rings[0]).append(reference)

    if in_hole:
        warnings.append("Unclosed '(' in reference list")

    # Holes that ended up empty carry no geometry
    return [rings[0]] + [ring for ring in rings[1:] if ring], warnings
