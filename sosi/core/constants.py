"""
Constants for SOSI reading.

This module defines the constant values used throughout the reading pipeline,
including the structural keywords of the grammar, the KOORDSYS to EPSG
identification table, the supported character sets and numeric bounds.
"""

# ============================================================================
# Grammar keywords
# ============================================================================

# Structural character; the number of leading dots is the statement level
LEVEL_MARKER = "."

# Whole-line comment marker (inline occurrences are data)
COMMENT_MARKER = "!"

HEADER_KEYWORD = "HODE"
END_KEYWORD = "SLUTT"

# Object keyword → group kind name (see core.types.GroupKind)
OBJECT_KEYWORDS = {
    "PUNKT": "POINT",
    "SYMBOL": "POINT",
    "KURVE": "CURVE",
    "LINJE": "CURVE",
    "BUEP": "CURVE",
    "BUE": "CURVE",
    "KLOTOIDE": "CURVE",
    "FLATE": "POLYGON",
    "TEKST": "TEXT",
}

# Coordinate block keywords → tuple dimension
COORDINATE_KEYWORDS = {
    "NØ": 2,
    "NØH": 3,
    "NØD": 3,
}

REFERENCE_KEYWORD = "REF"

# Markers that may trail a coordinate line and are not attributes
GEOMETRY_MARKER_KEYWORDS = {"KP"}

# ============================================================================
# Header keys
# ============================================================================

CHARSET_KEY = "TEGNSETT"
KOORDSYS_KEY = "KOORDSYS"
UNIT_KEY = "ENHET"
HEIGHT_UNIT_KEY = "ENHET-H"
DEPTH_UNIT_KEY = "ENHET-D"
ORIGIN_KEY = "ORIGO-NØ"
VERSION_KEY = "SOSI-VERSJON"
LEVEL_KEY = "SOSI-NIVÅ"
MIN_BOUND_KEY = "MIN-NØ"
MAX_BOUND_KEY = "MAX-NØ"

# ============================================================================
# Coordinate systems
# ============================================================================

# SOSI KOORDSYS code → EPSG code
# ⚠️ Identification only: no reprojection is done with these codes
KOORDSYS_TO_EPSG = {
    # NGO1948 Gauss-Krüger axes I-VIII
    **{str(code): 27390 + code for code in range(1, 9)},
    # EUREF89 UTM zones 31-36
    **{str(code): 25810 + code for code in range(21, 27)},
    # ED50 UTM zones 31-36
    **{str(code): 23000 + code for code in range(31, 37)},
    "50": 4230,   # ED50 geographic
    "84": 4258,   # EUREF89 geographic
    # EUREF89 NTM zones 5-30
    **{str(code): 5000 + code for code in range(105, 131)},
}

# ============================================================================
# Character sets
# ============================================================================

UTF8_BOM = b"\xef\xbb\xbf"

# Declared TEGNSETT value → Python codec name ("nd7" is handled by LineDecoder)
CHARSET_CODECS = {
    "UTF-8": "utf-8",
    "UTF8": "utf-8",
    "ISO8859-1": "latin-1",
    "ISO-8859-1": "latin-1",
    "ISO8859-10": "iso8859_10",
    "ISO-8859-10": "iso8859_10",
    "ANSI": "cp1252",
    "WINDOWS-1252": "cp1252",
    "DOSN8": "cp865",
    "ND7": "nd7",
    "DECN7": "nd7",
}

DEFAULT_CHARSET = "ISO8859-10"

# 7-bit Norwegian replaces these ASCII characters with the national letters
ND7_TRANSLATION = str.maketrans("[\\]{|}", "ÆØÅæøå")

# Number of physical lines scanned for a TEGNSETT declaration
HEADER_SCAN_LINES = 200

# ============================================================================
# Numeric bounds
# ============================================================================

# Raw integer coordinates beyond this magnitude lose precision as floats
MAX_RAW_COORDINATE = 2 ** 53
