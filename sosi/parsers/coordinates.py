"""
Coordinate decoding for SOSI groups.

Raw coordinates are integers in file units. Real-world values are obtained with
the header's unit factors and origin::

    east  = origin_east  + raw_east  * xy_factor
    north = origin_north + raw_north * xy_factor
    z     = raw_z * z_factor

Decoding is vectorised with NumPy; groups that mix 2-D and 3-D tuples fall back
to per-tuple decoding.
"""

from typing import List, Sequence

import numpy as np

from ..core.constants import MAX_RAW_COORDINATE
from ..core.errors import CoordinateDecodeError
from ..core.types import Coordinate, HeaderInfo, RawCoordinate


def _check_bounds(raw: Sequence[RawCoordinate]) -> None:
    for values in raw:
        for value in values:
            if abs(value) > MAX_RAW_COORDINATE:
                raise CoordinateDecodeError(
                    f"Raw coordinate {value} exceeds ±{MAX_RAW_COORDINATE}"
                )


def decode_coordinate(raw: RawCoordinate, header: HeaderInfo) -> Coordinate:
    """
    Decode a single (east, north[, z]) tuple.

    Example:
        >>> decode_coordinate((25367399, 664591976), header)  # ENHET 0.01
        (253673.99, 6645919.76)
    """
    _check_bounds([raw])
    origin_east, origin_north = header.origin
    east = origin_east + raw[0] * header.xy_factor
    north = origin_north + raw[1] * header.xy_factor
    if len(raw) > 2:
        return (east, north, raw[2] * header.z_factor)
    return (east, north)


def decode_coordinates(raw: Sequence[RawCoordinate], header: HeaderInfo) -> List[Coordinate]:
    """
    Decode all raw tuples of a group.

    Args:
        raw: Raw integer tuples in (east, north[, z]) order
        header: File header with unit factors and origin

    Returns:
        List of real-world coordinate tuples, same length and order as ``raw``

    Raises:
        CoordinateDecodeError: If a raw value exceeds MAX_RAW_COORDINATE
    """
    if not raw:
        return []

    _check_bounds(raw)

    dims = {len(values) for values in raw}
    if len(dims) != 1:
        return [decode_coordinate(values, header) for values in raw]

    dim = dims.pop()
    values = np.asarray(raw, dtype=np.float64)
    scale = np.array([header.xy_factor, header.xy_factor, header.z_factor][:dim])
    offset = np.array([header.origin[0], header.origin[1], 0.0][:dim])
    decoded = values * scale + offset

    return [tuple(row) for row in decoded.tolist()]
