"""
Unit tests for coordinate decoding

Tests cover:
1. Unit factor scaling
2. Origin offsets and height factor
3. Mixed dimensions
4. Magnitude bounds
"""

import pytest

from sosi.core.errors import CoordinateDecodeError
from sosi.core.types import HeaderInfo
from sosi.parsers.coordinates import decode_coordinate, decode_coordinates


@pytest.fixture
def header():
    return HeaderInfo(crs_code="EPSG:25833", koordsys="23", xy_factor=0.01, z_factor=0.01)


def test_decode_address_point(header):
    """Raw (25367399, 664591976) with ENHET 0.01 is (253673.99, 6645919.76)."""
    [(east, north)] = decode_coordinates([(25367399, 664591976)], header)
    assert east == pytest.approx(253673.99)
    assert north == pytest.approx(6645919.76)


def test_decode_matches_single_tuple_decoder(header):
    raw = [(25300000, 664500000), (25310000, 664510000)]
    decoded = decode_coordinates(raw, header)
    for values, coordinate in zip(raw, decoded):
        assert coordinate == pytest.approx(decode_coordinate(values, header))


def test_decode_empty(header):
    assert decode_coordinates([], header) == []


def test_decode_origin_and_height():
    header = HeaderInfo(
        crs_code="EPSG:25832", koordsys="22",
        xy_factor=0.1, z_factor=0.01, origin=(200000.0, 6600000.0),
    )
    [(east, north, height)] = decode_coordinates([(10, 20, 1234)], header)
    assert east == pytest.approx(200001.0)
    assert north == pytest.approx(6600002.0)
    assert height == pytest.approx(12.34)


def test_decode_mixed_dimensions(header):
    decoded = decode_coordinates([(100, 200), (100, 200, 300)], header)
    assert len(decoded[0]) == 2
    assert len(decoded[1]) == 3
    assert decoded[1][2] == pytest.approx(3.0)


def test_decode_returns_python_floats(header):
    [(east, north)] = decode_coordinates([(1, 2)], header)
    assert type(east) is float
    assert type(north) is float


def test_decode_rejects_oversized_values(header):
    with pytest.raises(CoordinateDecodeError):
        decode_coordinates([(2 ** 60, 1)], header)
    with pytest.raises(CoordinateDecodeError):
        decode_coordinate((1, -(2 ** 54)), header)
