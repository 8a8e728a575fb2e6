"""
Exception hierarchy for SOSI reading.

Source-level failures (``OSError`` from the byte source) are not wrapped and
propagate unchanged. Header failures are fatal when a reader is opened.
Decode and assembly failures are per feature: the reader catches them, records
the message on the feature and yields it with an empty geometry.
"""


class SosiError(Exception):
    """Base class for all SOSI reading errors."""


class SosiFormatError(SosiError, ValueError):
    """The source cannot be read as a SOSI file (e.g. no ``.HODE`` group)."""


class SosiHeaderError(SosiFormatError):
    """The header is present but a required value cannot be interpreted."""


class SosiClosedError(SosiError, ValueError):
    """A feature was requested from a reader that has been closed."""


class CoordinateDecodeError(SosiError, ValueError):
    """A raw coordinate cannot be converted to a real-world value."""


class GeometryAssemblyError(SosiError, ValueError):
    """A group's coordinates cannot be assembled into a geometry."""


class ReferenceResolutionError(GeometryAssemblyError):
    """A ring reference names a curve that has not been seen."""

    def __init__(self, reference: int, local_id=None):
        self.reference = reference
        self.local_id = local_id
        owner = f" in group {local_id}" if local_id is not None else ""
        super().__init__(f"Unresolved curve reference :{reference}{owner}")
