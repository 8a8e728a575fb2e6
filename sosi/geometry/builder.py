"""
shapely construction for assembled geometries.

Validity, emptiness and all other structural queries are delegated to shapely;
this module only maps the AssembledGeometry variants onto shapely types.
"""

from shapely.geometry import GeometryCollection, LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.validation import explain_validity

from ..core.types import GeometryType
from .assembler import AssembledGeometry, ShapeKind

_EMPTY_BY_TYPE = {
    GeometryType.PUNKT: Point,
    GeometryType.TEKST: Point,
    GeometryType.KURVE: LineString,
    GeometryType.FLATE: Polygon,
}


def empty_geometry(geometry_type: GeometryType) -> BaseGeometry:
    """
    Return an empty shapely geometry matching the declared type.

    Examples:
        >>> empty_geometry(GeometryType.FLATE).geom_type
        'Polygon'
        >>> empty_geometry(GeometryType.UNKNOWN).is_empty
        True
    """
    factory = _EMPTY_BY_TYPE.get(geometry_type, GeometryCollection)
    return factory()


def to_shapely(shape: AssembledGeometry) -> BaseGeometry:
    """
    Build the shapely geometry for an assembled shape.

    Args:
        shape: Output of assembler.assemble_geometry()

    Returns:
        Point, LineString or Polygon (with holes); an empty geometry of the
        declared type for EMPTY shapes
    """
    if shape.kind is ShapeKind.POINT:
        return Point(shape.vertices[0])
    if shape.kind is ShapeKind.LINE:
        return LineString(shape.vertices)
    if shape.kind is ShapeKind.POLYGON:
        outer, *holes = shape.rings
        return Polygon(outer, holes)
    return empty_geometry(shape.geometry_type)


def validity_problem(geometry: BaseGeometry):
    """Return shapely's explanation when ``geometry`` is invalid, else None."""
    if geometry.is_empty or geometry.is_valid:
        return None
    return explain_validity(geometry)
