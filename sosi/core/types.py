"""
Type definitions for the SOSI reading pipeline.

This module provides the core data structures passed between the tokenizer,
group builder, header extractor, geometry assembler and feature stream.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Tuple, Any

from .constants import KOORDSYS_TO_EPSG


class GroupKind(Enum):
    """Structural classification of a parsed group."""

    HEADER = "HEADER"
    POINT = "POINT"
    CURVE = "CURVE"
    POLYGON = "POLYGON"
    TEXT = "TEXT"
    REFERENCE_ONLY = "REFERENCE_ONLY"
    UNCLASSIFIED = "UNCLASSIFIED"


class GeometryType(Enum):
    """
    Declared geometry kind of a feature.

    Members carry the Norwegian keyword as value; the English names are
    aliases of the same members (``GeometryType.CURVE is GeometryType.KURVE``).
    """

    PUNKT = "PUNKT"
    KURVE = "KURVE"
    FLATE = "FLATE"
    TEKST = "TEKST"
    UNKNOWN = "UNKNOWN"

    POINT = "PUNKT"
    CURVE = "KURVE"
    POLYGON = "FLATE"
    TEXT = "TEKST"

    @classmethod
    def from_kind(cls, kind: GroupKind) -> "GeometryType":
        return _KIND_TO_GEOMETRY_TYPE.get(kind, cls.UNKNOWN)


_KIND_TO_GEOMETRY_TYPE = {
    GroupKind.POINT: GeometryType.PUNKT,
    GroupKind.CURVE: GeometryType.KURVE,
    GroupKind.REFERENCE_ONLY: GeometryType.KURVE,
    GroupKind.POLYGON: GeometryType.FLATE,
    GroupKind.TEXT: GeometryType.TEKST,
}


# Raw integer coordinate (east, north) or (east, north, height)
RawCoordinate = Tuple[int, ...]

# Decoded real-world coordinate
Coordinate = Tuple[float, ...]


@dataclass
class Statement:
    """
    One logical statement of the line grammar.

    Attributes:
        level: Number of leading level markers (1 for ``.KURVE``, 2 for ``..NØ``)
        keyword: Keyword without level markers, e.g. ``"NØ"``
        value: Text following the keyword on its own line (may be empty)
        continuation: Following physical lines without a level marker
        line_number: 1-based physical line number where the statement starts
        offset: Byte offset of the physical line where the statement starts
    """

    level: int
    keyword: str
    value: str = ""
    continuation: List[str] = field(default_factory=list)
    line_number: int = 0
    offset: int = 0

    def lines(self) -> List[str]:
        """Return the value line followed by the continuation lines, skipping blanks."""
        lines = [self.value] if self.value else []
        lines.extend(line for line in self.continuation if line)
        return lines

    def text(self) -> str:
        """Return value and continuation lines joined by single spaces, otherwise verbatim."""
        return " ".join(self.lines())


@dataclass
class RawGroup:
    """
    A level-1 statement block with everything nested below it.

    Attributes:
        level: Level of the opening statement (always 1 for file groups)
        keyword: Opening keyword, e.g. ``"KURVE"``
        kind: Structural classification
        local_id: Serial number written after the keyword, unique within a file
        attributes: Flattened attribute map (insertion ordered, last value wins)
        coordinates: Raw integer tuples in (east, north[, height]) order
        rings: Signed curve references; index 0 is the outer ring, others holes
        warnings: Grammar problems recovered while building the group
        line_number: Line number of the opening statement
        start_offset: Byte offset of the opening statement
        end_offset: Byte offset where the next group (or end marker) starts, or
            None when the group runs to the end of input
    """

    level: int
    keyword: str
    kind: GroupKind = GroupKind.UNCLASSIFIED
    local_id: Optional[int] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    coordinates: List[RawCoordinate] = field(default_factory=list)
    rings: List[List[int]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    line_number: int = 0
    start_offset: int = 0
    end_offset: Optional[int] = None

    @property
    def references(self) -> List[int]:
        """All signed references in declaration order."""
        return [ref for ring in self.rings for ref in ring]

    @property
    def is_header(self) -> bool:
        return self.kind is GroupKind.HEADER


@dataclass(frozen=True)
class HeaderInfo:
    """
    File-global values derived once from the ``.HODE`` group.

    Attributes:
        crs_code: Standard CRS identifier, e.g. ``"EPSG:25833"``
        koordsys: KOORDSYS code as declared in the file
        xy_factor: Multiplier for raw east/north integers
        z_factor: Multiplier for raw height/depth integers
        origin: (east, north) offset added after scaling
        charset: Declared TEGNSETT value, or None
        sosi_version: Declared SOSI-VERSJON, or None
        sosi_level: Declared SOSI-NIVÅ, or None
        bounds: (min_east, min_north, max_east, max_north) from OMRÅDE, or None
        attributes: Flattened header statements
    """

    crs_code: str
    koordsys: str
    xy_factor: float = 1.0
    z_factor: float = 1.0
    origin: Tuple[float, float] = (0.0, 0.0)
    charset: Optional[str] = None
    sosi_version: Optional[str] = None
    sosi_level: Optional[str] = None
    bounds: Optional[Tuple[float, float, float, float]] = None
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def epsg(self) -> int:
        return KOORDSYS_TO_EPSG[self.koordsys]

    def to_pyproj(self):
        """Return the pyproj CRS for ``crs_code`` (identification only)."""
        from ..transforms.crs_detection import crs_from_identifier
        return crs_from_identifier(self.crs_code)


@dataclass(frozen=True)
class Feature:
    """
    One object group materialised for the caller.

    Attributes:
        id: Local id of the group, or None
        attributes: Attribute map; keys are trimmed and non-empty, values non-null
        geometry_type: Declared geometry kind
        geometry: shapely geometry, never None (possibly empty)
        coordinate_count: Number of vertices in ``geometry``
        errors: Recovered grammar, decode and resolution problems
    """

    id: Optional[int]
    attributes: Dict[str, str]
    geometry_type: GeometryType
    geometry: Any  # shapely.geometry.base.BaseGeometry
    coordinate_count: int = 0
    errors: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.geometry is None:
            raise ValueError("Feature geometry must not be None")
        for key, value in self.attributes.items():
            if key is None or not key.strip() or key != key.strip():
                raise ValueError(f"Invalid attribute key: {key!r}")
            if value is None:
                raise ValueError(f"Attribute {key!r} has no value")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the attribute value for ``key``, or ``default`` when absent."""
        return self.attributes.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self.attributes[key]

    def __contains__(self, key: str) -> bool:
        return key in self.attributes

    @property
    def objtype(self) -> Optional[str]:
        return self.attributes.get("OBJTYPE")

    @property
    def is_empty(self) -> bool:
        return self.geometry.is_empty

    @property
    def is_valid(self) -> bool:
        return self.geometry.is_valid
