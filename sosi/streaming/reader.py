"""
SOSI Feature Stream - Core Implementation

Pull-based reader that turns a SOSI byte source into Feature objects, one
object group at a time.

Memory Usage: O(1 group) + O(curves) for the curve cache
Processing: single forward pass, no second read of the source

Architecture:
1. encoding.open_byte_source() - BOM / TEGNSETT detection, per-line decoding
2. tokenizer.tokenize_lines() - physical lines → statements
3. groups.build_groups() - statements → RawGroup per level-1 statement
4. parsers.header.extract_header() - once, before the first feature
5. parsers.coordinates + geometry.assembler - per group, curves cached by id
6. geometry.builder.to_shapely() - shapely geometry for the caller
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

from shapely.errors import ShapelyError

from ..core.constants import DEFAULT_CHARSET, HEADER_SCAN_LINES
from ..core.errors import (
    CoordinateDecodeError,
    GeometryAssemblyError,
    SosiClosedError,
    SosiFormatError,
)
from ..core.types import Feature, GeometryType, GroupKind, HeaderInfo, RawGroup
from ..geometry.assembler import AssembledGeometry, ShapeKind, assemble_geometry
from ..geometry.builder import empty_geometry, to_shapely, validity_problem
from ..parsers.coordinates import decode_coordinates
from ..parsers.header import extract_header
from ..utils.logging import log, make_debug_logger
from .curve_cache import CurveCache
from .encoding import iter_decoded_lines, open_byte_source
from .groups import build_groups
from .tokenizer import tokenize_lines

_log = make_debug_logger("[STREAM]")


@dataclass
class ReaderConfig:
    """Configuration for SosiReader."""

    debug: bool = False
    """Enable debug logging"""

    default_charset: str = DEFAULT_CHARSET
    """Charset used when the file has neither BOM nor TEGNSETT declaration"""

    limit: Optional[int] = None
    """Maximum number of features to yield (None = unlimited)"""

    objtypes: Optional[List[str]] = None
    """Yield only features whose OBJTYPE is listed (None = all)"""

    yield_reference_curves: bool = False
    """Also yield curves that carry no attributes (polygon boundary input only)"""

    validate_geometry: bool = True
    """Record shapely's explanation on polygons that are not valid"""

    header_scan_lines: int = HEADER_SCAN_LINES
    """Number of physical lines searched for a TEGNSETT declaration"""

    @classmethod
    def from_env(cls, **overrides) -> "ReaderConfig":
        """Build a config from SOSI_* environment variables (see sosi.config)."""
        from .. import config

        values = {"debug": config.DEBUG, "default_charset": config.DEFAULT_CHARSET_NAME}
        values.update(overrides)
        return cls(**values)


@dataclass
class ReaderStats:
    """Counters kept while reading."""

    groups: int = 0
    features: int = 0
    skipped: int = 0
    errors: int = 0


class SosiReader:
    """
    Forward-only feature stream over one SOSI source.

    The header is read when the reader is constructed; the CRS and unit factors
    are fixed from then on. Features are produced lazily by next_feature() or by
    iterating over the reader.

    Example:
        ```python
        with SosiReader("0219Adresser.SOS") as reader:
            print(reader.get_crs(), reader.get_xy_factor())
            for feature in reader:
                print(feature.id, feature.get("OBJTYPE"), feature.geometry)
        ```

    Raises (on construction):
        OSError: If the source cannot be opened or read
        SosiFormatError: If the source has no ``.HODE`` group
        SosiHeaderError: If the CRS code or unit factors cannot be interpreted
    """

    def __init__(self, source, config: Optional[ReaderConfig] = None):
        self.config = config or ReaderConfig()
        debug = self.config.debug

        self._source, self._decoder = open_byte_source(
            source,
            default_charset=self.config.default_charset,
            scan_lines=self.config.header_scan_lines,
            debug=debug,
        )
        self._closed = False
        self._exhausted = False
        self._consumed = 0
        self._curves = CurveCache()
        self._objtypes = set(self.config.objtypes) if self.config.objtypes else None
        self.stats = ReaderStats()

        try:
            lines = iter_decoded_lines(self._source, self._decoder)
            self._groups: Iterator[RawGroup] = build_groups(tokenize_lines(lines, debug), debug)
            first = next(self._groups, None)
            if first is None:
                raise SosiFormatError(f"No SOSI groups in {self._source.name}")
            self._header = extract_header(first)
        except BaseException:
            self.close()
            raise

        _log(
            f"Opened {self._source.name}: charset={self._decoder.charset}, "
            f"crs={self._header.crs_code}, enhet={self._header.xy_factor}",
            debug,
        )

    # ------------------------------------------------------------------
    # Query surface
    # ------------------------------------------------------------------

    @property
    def header(self) -> HeaderInfo:
        return self._header

    def get_crs(self) -> str:
        """CRS identifier of the file, e.g. ``"EPSG:25833"``."""
        return self._header.crs_code

    def get_xy_factor(self) -> float:
        """Unit factor for east/north values (``ENHET``, default 1.0)."""
        return self._header.xy_factor

    def get_z_factor(self) -> float:
        return self._header.z_factor

    @property
    def crs_object(self):
        """pyproj CRS for get_crs() (identification only)."""
        return self._header.to_pyproj()

    @property
    def charset(self) -> str:
        return self._decoder.charset

    @property
    def closed(self) -> bool:
        return self._closed

    def get_progress(self) -> float:
        """
        Fraction of input bytes consumed by the features returned so far.

        Returns:
            0.0 before the first feature and whenever the total size is unknown;
            exactly 1.0 once the stream is exhausted
        """
        if self._exhausted:
            return 1.0
        total = self._source.total_size
        if not total:
            return 0.0
        return min(self._consumed / total, 1.0)

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def next_feature(self) -> Optional[Feature]:
        """
        Return the next feature, or None at end of stream.

        Raises:
            SosiClosedError: If the reader has been closed
            OSError: If reading the source fails
        """
        if self._closed:
            raise SosiClosedError("Cannot read from a closed SosiReader")
        if self._exhausted:
            return None

        limit = self.config.limit
        if limit is not None and self.stats.features >= limit:
            _log(f"Reached limit ({limit}), stopping", self.config.debug)
            self._finish()
            return None

        for group in self._groups:
            # The last group of a file without .SLUTT only counts once exhausted
            self._consumed = (
                group.end_offset if group.end_offset is not None else group.start_offset
            )
            self.stats.groups += 1
            feature = self._materialize(group)
            if feature is None:
                self.stats.skipped += 1
                continue
            self.stats.features += 1
            return feature

        self._finish()
        return None

    def __iter__(self) -> "SosiReader":
        return self

    def __next__(self) -> Feature:
        feature = self.next_feature()
        if feature is None:
            raise StopIteration
        return feature

    def _finish(self) -> None:
        self._exhausted = True
        _log(
            f"Read complete: groups={self.stats.groups}, features={self.stats.features}, "
            f"skipped={self.stats.skipped}, errors={self.stats.errors}, "
            f"curves cached={len(self._curves)}, utf8 fallbacks={self._decoder.fallback_count}",
            self.config.debug,
        )

    def _materialize(self, group: RawGroup) -> Optional[Feature]:
        """Decode, assemble and wrap one group; None if it is not yielded."""
        debug = self.config.debug

        if group.is_header:
            _log(f"Line {group.line_number}: additional .HODE ignored", debug)
            return None

        errors = list(group.warnings)
        geometry_type = GeometryType.from_kind(group.kind)

        try:
            coordinates = decode_coordinates(group.coordinates, self._header)
            shape = assemble_geometry(group, coordinates, self._curves)
        except (CoordinateDecodeError, GeometryAssemblyError) as e:
            errors.append(str(e))
            shape = AssembledGeometry.empty(geometry_type)

        if group.kind is GroupKind.REFERENCE_ONLY and not self.config.yield_reference_curves:
            return None
        if self._objtypes is not None and group.attributes.get("OBJTYPE") not in self._objtypes:
            return None

        coordinate_count = shape.coordinate_count
        try:
            geometry = to_shapely(shape)
        except ShapelyError as e:
            errors.append(f"Geometry construction failed: {e}")
            geometry = empty_geometry(geometry_type)
            coordinate_count = 0

        if self.config.validate_geometry and shape.kind is ShapeKind.POLYGON:
            problem = validity_problem(geometry)
            if problem:
                errors.append(f"Invalid polygon: {problem}")

        if errors:
            self.stats.errors += 1
            for message in errors:
                _log(f".{group.keyword} {group.local_id}: {message}", debug, logging.WARNING)

        return Feature(
            id=group.local_id,
            attributes=dict(group.attributes),
            geometry_type=geometry_type,
            geometry=geometry,
            coordinate_count=coordinate_count,
            errors=tuple(errors),
        )

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the byte source. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._source.close()
        self._curves.clear()
        log(f"Closed {self._source.name}", logging.DEBUG)

    def __enter__(self) -> "SosiReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_sosi(source, config: Optional[ReaderConfig] = None) -> SosiReader:
    """
    Open a SOSI source for reading.

    Args:
        source: File path, binary stream or bytes
        config: Reader configuration (defaults to ReaderConfig())

    Returns:
        SosiReader positioned before the first feature

    Example:
        ```python
        reader = open_sosi("1421_Arealdekke.sos", ReaderConfig(objtypes=["Innsjø"]))
        try:
            lakes = list(reader)
        finally:
            reader.close()
        ```
    """
    return SosiReader(source, config)
