"""
Reference resolution and geometry assembly.

Turns a classified RawGroup plus its decoded coordinates into an
AssembledGeometry, a small tagged value that carries exactly the vertices its
kind needs. Conversion to shapely objects happens in geometry.builder.

Rules per group kind:
- POINT / TEXT: first own coordinate; TEXT without coordinates may follow
  referenced curves as a line
- CURVE / REFERENCE_ONLY: own coordinates as a line, cached under the local id
  before the geometry is returned
- POLYGON: rings stitched from signed curve references (outer ring first,
  then holes); each ring is closed by repeating its first vertex
- UNCLASSIFIED: one coordinate → point, more → line
- No coordinates and no references → EMPTY of the declared type
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..core.errors import GeometryAssemblyError, ReferenceResolutionError
from ..core.types import Coordinate, GeometryType, GroupKind, RawGroup
from ..streaming.curve_cache import CurveCache

Ring = Tuple[Coordinate, ...]


class ShapeKind(Enum):
    POINT = "POINT"
    LINE = "LINE"
    POLYGON = "POLYGON"
    EMPTY = "EMPTY"


@dataclass(frozen=True)
class AssembledGeometry:
    """
    Tagged geometry value.

    Attributes:
        kind: Shape variant
        geometry_type: Declared geometry type of the owning group
        vertices: Point (one vertex) or line vertices
        rings: Polygon rings, outer ring first; every ring is closed
    """

    kind: ShapeKind
    geometry_type: GeometryType
    vertices: Tuple[Coordinate, ...] = ()
    rings: Tuple[Ring, ...] = ()

    @classmethod
    def empty(cls, geometry_type: GeometryType) -> "AssembledGeometry":
        return cls(ShapeKind.EMPTY, geometry_type)

    @property
    def coordinate_count(self) -> int:
        """Number of vertices the geometry is made of."""
        if self.kind is ShapeKind.POLYGON:
            return sum(len(ring) for ring in self.rings)
        return len(self.vertices)

    @property
    def is_empty(self) -> bool:
        return self.kind is ShapeKind.EMPTY


def stitch_ring(
    references: Sequence[int],
    cache: CurveCache,
    local_id: Optional[int] = None,
) -> Ring:
    """
    Concatenate referenced curves into one closed ring.

    A segment whose first vertex repeats the ring's current last vertex is
    joined without duplicating that vertex.

    Args:
        references: Signed curve ids in traversal order
        cache: Curves seen so far
        local_id: Id of the owning group (for error messages)

    Returns:
        Closed ring (first vertex == last vertex)

    Raises:
        ReferenceResolutionError: If a referenced curve is not in the cache
        GeometryAssemblyError: If the ring has fewer than 4 vertices once closed

    Example:
        >>> # curve 12: A B C, curve 45: C D A
        >>> stitch_ring([12, -45], cache)
        (A, B, C, A, D, C, A)
    """
    ring: List[Coordinate] = []
    for reference in references:
        segment = cache.resolve(reference)
        if segment is None:
            raise ReferenceResolutionError(reference, local_id)
        if ring and segment and ring[-1] == segment[0]:
            segment = segment[1:]
        ring.extend(segment)

    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])

    if len(ring) < 4:
        raise GeometryAssemblyError(
            f"Ring of group {local_id} has {len(ring)} vertices, at least 4 required"
        )
    return tuple(ring)


def _follow_references(group: RawGroup, cache: CurveCache) -> Tuple[Coordinate, ...]:
    """Concatenate all referenced curves into one open vertex sequence."""
    vertices: List[Coordinate] = []
    for reference in group.references:
        segment = cache.resolve(reference)
        if segment is None:
            raise ReferenceResolutionError(reference, group.local_id)
        if vertices and segment and vertices[-1] == segment[0]:
            segment = segment[1:]
        vertices.extend(segment)
    return tuple(vertices)


def _line(
    vertices: Sequence[Coordinate],
    geometry_type: GeometryType,
    local_id: Optional[int],
) -> AssembledGeometry:
    if not vertices:
        return AssembledGeometry.empty(geometry_type)
    if len(vertices) < 2:
        raise GeometryAssemblyError(f"Line of group {local_id} has a single vertex")
    return AssembledGeometry(ShapeKind.LINE, geometry_type, vertices=tuple(vertices))


def _point(vertex: Coordinate, geometry_type: GeometryType) -> AssembledGeometry:
    return AssembledGeometry(ShapeKind.POINT, geometry_type, vertices=(vertex,))


def assemble_geometry(
    group: RawGroup,
    coordinates: List[Coordinate],
    cache: CurveCache,
) -> AssembledGeometry:
    """
    Assemble the geometry of one group.

    Args:
        group: Classified group
        coordinates: Decoded own coordinates of the group
        cache: Curve cache; updated for CURVE and REFERENCE_ONLY groups

    Returns:
        AssembledGeometry; EMPTY when nothing can be assembled

    Raises:
        ReferenceResolutionError: If a referenced curve is unknown
        GeometryAssemblyError: If the vertices cannot form the declared shape
    """
    geometry_type = GeometryType.from_kind(group.kind)
    kind = group.kind

    if kind in (GroupKind.CURVE, GroupKind.REFERENCE_ONLY):
        if group.local_id is not None:
            cache.put(group.local_id, coordinates)
        return _line(coordinates, geometry_type, group.local_id)

    if kind is GroupKind.POLYGON:
        if any(group.rings):
            outer, *holes = group.rings
            if not outer:
                raise GeometryAssemblyError(
                    f"Polygon {group.local_id} has holes but no outer ring"
                )
            rings = [stitch_ring(outer, cache, group.local_id)]
            rings.extend(stitch_ring(hole, cache, group.local_id) for hole in holes)
            return AssembledGeometry(ShapeKind.POLYGON, geometry_type, rings=tuple(rings))
        if len(coordinates) >= 3:
            ring = list(coordinates)
            if ring[0] != ring[-1]:
                ring.append(ring[0])
            if len(ring) >= 4:
                return AssembledGeometry(
                    ShapeKind.POLYGON, geometry_type, rings=(tuple(ring),)
                )
        # A lone representative point does not make a surface
        return AssembledGeometry.empty(geometry_type)

    if kind in (GroupKind.POINT, GroupKind.TEXT):
        if coordinates:
            return _point(coordinates[0], geometry_type)
        if kind is GroupKind.TEXT and group.references:
            return _line(_follow_references(group, cache), geometry_type, group.local_id)
        return AssembledGeometry.empty(geometry_type)

    # Unclassified groups
    if len(coordinates) == 1:
        return _point(coordinates[0], geometry_type)
    if coordinates:
        return _line(coordinates, geometry_type, group.local_id)
    if group.references:
        return _line(_follow_references(group, cache), geometry_type, group.local_id)
    return AssembledGeometry.empty(geometry_type)
