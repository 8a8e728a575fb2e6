"""
Unit tests for header extraction and CRS identification

Tests cover:
1. KOORDSYS → EPSG mapping
2. Unit factors and defaults
3. Origin and bounds
4. Error handling
"""

import pytest

from sosi.core.errors import SosiFormatError, SosiHeaderError
from sosi.core.types import GroupKind, RawGroup
from sosi.parsers.header import extract_header
from sosi.transforms.crs_detection import crs_from_identifier, detect_crs, koordsys_for_crs


def _header_group(**attributes):
    return RawGroup(level=1, keyword="HODE", kind=GroupKind.HEADER, attributes=attributes)


# ============================================================================
# CRS Identification Tests
# ============================================================================

@pytest.mark.parametrize("code,identifier", [
    ("1", "EPSG:27391"),
    ("22", "EPSG:25832"),
    ("23", "EPSG:25833"),
    ("33", "EPSG:23033"),
    ("50", "EPSG:4230"),
    ("84", "EPSG:4258"),
    ("110", "EPSG:5110"),
])
def test_detect_crs(code, identifier):
    assert detect_crs(code) == identifier


def test_detect_crs_unknown_code():
    with pytest.raises(SosiHeaderError):
        detect_crs("999")


def test_koordsys_for_crs():
    assert koordsys_for_crs("epsg:25833") == "23"
    with pytest.raises(SosiHeaderError):
        koordsys_for_crs("EPSG:3857")


def test_crs_from_identifier():
    pytest.importorskip("pyproj")
    crs = crs_from_identifier("EPSG:25833")
    assert crs.to_epsg() == 25833
    assert "UTM zone 33N" in crs.name


# ============================================================================
# Header Extraction Tests
# ============================================================================

def test_extract_header_full():
    header = extract_header(_header_group(**{
        "TEGNSETT": "UTF-8",
        "KOORDSYS": "23",
        "ORIGO-NØ": "6600000 200000",
        "ENHET": "0.01",
        "ENHET-H": "0.1",
        "MIN-NØ": "6645000 253000",
        "MAX-NØ": "6647000 255000",
        "SOSI-VERSJON": "4.0",
        "SOSI-NIVÅ": "2",
    }))

    assert header.crs_code == "EPSG:25833"
    assert header.epsg == 25833
    assert header.koordsys == "23"
    assert header.xy_factor == 0.01
    assert header.z_factor == 0.1
    assert header.origin == (200000.0, 6600000.0)
    assert header.bounds == (253000.0, 6645000.0, 255000.0, 6647000.0)
    assert header.charset == "UTF-8"
    assert header.sosi_version == "4.0"
    assert header.sosi_level == "2"


def test_extract_header_defaults():
    header = extract_header(_header_group(KOORDSYS="22"))

    assert header.xy_factor == 1.0
    assert header.z_factor == 1.0
    assert header.origin == (0.0, 0.0)
    assert header.bounds is None
    assert header.charset is None


def test_z_factor_defaults_to_xy_factor():
    header = extract_header(_header_group(KOORDSYS="22", ENHET="0.001"))
    assert header.z_factor == 0.001


def test_koordsys_with_trailing_tokens():
    header = extract_header(_header_group(KOORDSYS="23 SYSKODE"))
    assert header.crs_code == "EPSG:25833"


def test_header_is_immutable():
    header = extract_header(_header_group(KOORDSYS="23"))
    with pytest.raises(AttributeError):
        header.xy_factor = 2.0


# ============================================================================
# Error Handling Tests
# ============================================================================

def test_missing_koordsys():
    with pytest.raises(SosiHeaderError):
        extract_header(_header_group(ENHET="0.01"))


def test_unknown_koordsys():
    with pytest.raises(SosiHeaderError):
        extract_header(_header_group(KOORDSYS="77"))


@pytest.mark.parametrize("enhet", ["abc", "0", "-0.01", ""])
def test_bad_unit(enhet):
    with pytest.raises(SosiHeaderError):
        extract_header(_header_group(KOORDSYS="23", ENHET=enhet))


def test_bad_origin():
    with pytest.raises(SosiHeaderError):
        extract_header(_header_group(KOORDSYS="23", **{"ORIGO-NØ": "0"}))


def test_not_a_header_group():
    group = RawGroup(level=1, keyword="PUNKT", kind=GroupKind.POINT)
    with pytest.raises(SosiFormatError):
        extract_header(group)
