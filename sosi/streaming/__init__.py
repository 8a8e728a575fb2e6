"""
SOSI Streaming Reader Module

Forward-only reader for SOSI files with a bounded memory footprint: one group
at a time, plus the coordinates of the curves later polygons may reference.

Key Components:
- encoding.py: Byte source, BOM / TEGNSETT detection, per-line decoding
- tokenizer.py: Physical lines → level-prefixed statements
- groups.py: Statements → RawGroup objects
- curve_cache.py: Local id → curve coordinates for ring references
- reader.py: SosiReader feature stream
"""

from .reader import SosiReader, ReaderConfig, open_sosi
from .curve_cache import CurveCache

__all__ = [
    "SosiReader",
    "ReaderConfig",
    "open_sosi",
    "CurveCache",
]
