"""
Header extraction for SOSI files.

The ``.HODE`` group carries the file-global values every coordinate depends on::

    .HODE
    ..TEGNSETT UTF-8
    ..TRANSPAR
    ...KOORDSYS 23
    ...ORIGO-NØ 0 0
    ...ENHET 0.01
    ..OMRÅDE
    ...MIN-NØ 6640000 250000
    ...MAX-NØ 6650000 260000
    ..SOSI-VERSJON 4.0

Nested statements are flattened by the group builder, so the values are looked
up by key regardless of their level.
"""

from typing import Optional, Tuple

from ..core.constants import (
    CHARSET_KEY,
    DEPTH_UNIT_KEY,
    HEIGHT_UNIT_KEY,
    KOORDSYS_KEY,
    LEVEL_KEY,
    MAX_BOUND_KEY,
    MIN_BOUND_KEY,
    ORIGIN_KEY,
    UNIT_KEY,
    VERSION_KEY,
)
from ..core.errors import SosiFormatError, SosiHeaderError
from ..core.types import HeaderInfo, RawGroup
from ..transforms.crs_detection import detect_crs


def _parse_factor(raw: Optional[str], key: str, default: float) -> float:
    if raw is None:
        return default
    try:
        factor = float(raw.split()[0])
    except (ValueError, IndexError):
        raise SosiHeaderError(f"Unparsable {key}: {raw!r}")
    if factor <= 0:
        raise SosiHeaderError(f"{key} must be positive: {raw!r}")
    return factor


def _parse_pair(raw: Optional[str], key: str) -> Optional[Tuple[float, float]]:
    """Parse an ``n e`` pair and return it as (east, north)."""
    if raw is None:
        return None
    parts = raw.split()
    try:
        north, east = float(parts[0]), float(parts[1])
    except (ValueError, IndexError):
        raise SosiHeaderError(f"Unparsable {key}: {raw!r}")
    return east, north


def extract_header(group: RawGroup) -> HeaderInfo:
    """
    Derive HeaderInfo from the ``.HODE`` group.

    Args:
        group: First group of the file

    Returns:
        Immutable HeaderInfo

    Raises:
        SosiFormatError: If ``group`` is not a header group
        SosiHeaderError: If KOORDSYS is missing or unknown, or a unit or origin
            cannot be parsed

    Example:
        >>> header = extract_header(group)
        >>> header.crs_code, header.xy_factor
        ('EPSG:25833', 0.01)
    """
    if not group.is_header:
        raise SosiFormatError(
            f"Expected .HODE at line {group.line_number}, found .{group.keyword}"
        )

    attrs = group.attributes

    koordsys_raw = attrs.get(KOORDSYS_KEY)
    if not koordsys_raw or not koordsys_raw.split():
        raise SosiHeaderError("Header has no KOORDSYS declaration")
    koordsys = koordsys_raw.split()[0]
    crs_code = detect_crs(koordsys)

    xy_factor = _parse_factor(attrs.get(UNIT_KEY), UNIT_KEY, 1.0)
    z_raw = attrs.get(HEIGHT_UNIT_KEY, attrs.get(DEPTH_UNIT_KEY))
    z_factor = _parse_factor(z_raw, HEIGHT_UNIT_KEY, xy_factor)

    origin = _parse_pair(attrs.get(ORIGIN_KEY), ORIGIN_KEY) or (0.0, 0.0)

    bounds = None
    low = _parse_pair(attrs.get(MIN_BOUND_KEY), MIN_BOUND_KEY)
    high = _parse_pair(attrs.get(MAX_BOUND_KEY), MAX_BOUND_KEY)
    if low and high:
        bounds = (low[0], low[1], high[0], high[1])

    return HeaderInfo(
        crs_code=crs_code,
        koordsys=koordsys,
        xy_factor=xy_factor,
        z_factor=z_factor,
        origin=origin,
        charset=attrs.get(CHARSET_KEY),
        sosi_version=attrs.get(VERSION_KEY),
        sosi_level=attrs.get(LEVEL_KEY),
        bounds=bounds,
        attributes=dict(attrs),
    )
