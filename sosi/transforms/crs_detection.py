"""
CRS (Coordinate Reference System) identification for SOSI files.

SOSI headers declare their coordinate system with a numeric ``KOORDSYS`` code.
This module maps those codes to standard ``EPSG:nnnn`` identifiers and can look
the identifier up in pyproj. No coordinates are transformed here.
"""

from ..core.constants import KOORDSYS_TO_EPSG
from ..core.errors import SosiHeaderError


def detect_crs(koordsys: str) -> str:
    """
    Map a KOORDSYS code to an EPSG identifier.

    Args:
        koordsys: Code as written in the header (first token of ``...KOORDSYS``)

    Returns:
        Identifier such as ``"EPSG:25833"``

    Raises:
        SosiHeaderError: If the code is not in the KOORDSYS table

    Example:
        >>> detect_crs("23")
        'EPSG:25833'
    """
    code = koordsys.strip()
    epsg = KOORDSYS_TO_EPSG.get(code)
    if epsg is None:
        raise SosiHeaderError(f"Unknown KOORDSYS code: {koordsys!r}")
    return f"EPSG:{epsg}"


def koordsys_for_crs(identifier: str) -> str:
    """
    Reverse lookup of detect_crs().

    Raises:
        SosiHeaderError: If no KOORDSYS code maps to ``identifier``
    """
    for code, epsg in KOORDSYS_TO_EPSG.items():
        if f"EPSG:{epsg}" == identifier.upper():
            return code
    raise SosiHeaderError(f"No KOORDSYS code for {identifier!r}")


def crs_from_identifier(identifier: str):
    """
    Look up a CRS identifier in pyproj.

    Args:
        identifier: ``EPSG:nnnn`` string returned by detect_crs()

    Returns:
        pyproj.CRS instance (name, axis info, area of use)

    Raises:
        RuntimeError: If pyproj is not installed
    """
    try:
        from pyproj import CRS
    except Exception as e:
        raise RuntimeError("pyproj is required for CRS lookup but is not installed") from e

    return CRS.from_user_input(identifier)
