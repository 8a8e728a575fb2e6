"""
SOSI reader.

Reads the Norwegian SOSI geodata text format and yields typed features with
shapely geometries.

Public API:
- open_sosi / SosiReader: forward-only feature stream over a file path, binary
  stream or bytes
- ReaderConfig: reader options (debug, default charset, limit, OBJTYPE filter)
- Feature, GeometryType, HeaderInfo: values returned by the reader
"""

from .core.errors import (
    CoordinateDecodeError,
    GeometryAssemblyError,
    ReferenceResolutionError,
    SosiClosedError,
    SosiError,
    SosiFormatError,
    SosiHeaderError,
)
from .core.types import Feature, GeometryType, HeaderInfo
from .streaming.reader import ReaderConfig, SosiReader, open_sosi

__version__ = "0.1.0"

__all__ = [
    "open_sosi",
    "SosiReader",
    "ReaderConfig",
    "Feature",
    "GeometryType",
    "HeaderInfo",
    "SosiError",
    "SosiFormatError",
    "SosiHeaderError",
    "SosiClosedError",
    "CoordinateDecodeError",
    "GeometryAssemblyError",
    "ReferenceResolutionError",
]
