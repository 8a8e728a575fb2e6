"""
Unit tests for shapely construction
"""

import pytest
from shapely.geometry import GeometryCollection, LineString, Point, Polygon

from sosi.core.types import GeometryType
from sosi.geometry.assembler import AssembledGeometry, ShapeKind
from sosi.geometry.builder import empty_geometry, to_shapely, validity_problem


@pytest.mark.parametrize("geometry_type,expected", [
    (GeometryType.PUNKT, Point),
    (GeometryType.TEKST, Point),
    (GeometryType.KURVE, LineString),
    (GeometryType.FLATE, Polygon),
    (GeometryType.UNKNOWN, GeometryCollection),
])
def test_empty_geometry_matches_declared_type(geometry_type, expected):
    geometry = empty_geometry(geometry_type)
    assert isinstance(geometry, expected)
    assert geometry.is_empty


def test_point():
    geometry = to_shapely(AssembledGeometry(ShapeKind.POINT, GeometryType.PUNKT, vertices=((1.0, 2.0),)))
    assert isinstance(geometry, Point)
    assert (geometry.x, geometry.y) == (1.0, 2.0)


def test_line_with_height():
    shape = AssembledGeometry(
        ShapeKind.LINE, GeometryType.KURVE, vertices=((0.0, 0.0, 1.0), (1.0, 1.0, 2.0))
    )
    geometry = to_shapely(shape)
    assert isinstance(geometry, LineString)
    assert geometry.has_z


def test_polygon_with_hole_is_valid():
    outer = ((0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0))
    hole = ((2.0, 2.0), (4.0, 2.0), (4.0, 4.0), (2.0, 2.0))
    geometry = to_shapely(AssembledGeometry(ShapeKind.POLYGON, GeometryType.FLATE, rings=(outer, hole)))

    assert isinstance(geometry, Polygon)
    assert len(geometry.interiors) == 1
    assert geometry.is_valid
    assert validity_problem(geometry) is None


def test_validity_problem_reports_self_intersection():
    bowtie = ((0.0, 0.0), (10.0, 10.0), (10.0, 0.0), (0.0, 10.0), (0.0, 0.0))
    geometry = to_shapely(AssembledGeometry(ShapeKind.POLYGON, GeometryType.FLATE, rings=(bowtie,)))
    assert "Self-intersection" in validity_problem(geometry)


def test_empty_shape():
    geometry = to_shapely(AssembledGeometry.empty(GeometryType.FLATE))
    assert isinstance(geometry, Polygon)
    assert geometry.is_empty
    assert validity_problem(geometry) is None
