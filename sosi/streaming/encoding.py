"""
Byte source and character decoding for SOSI files.

SOSI files come in several historical encodings. The encoding is chosen once per
file before any statement is tokenized:

1. UTF-8 byte-order mark → UTF-8 (the mark is skipped)
2. ``..TEGNSETT`` declaration in the header → declared charset
3. Otherwise → configured 8-bit default (ISO8859-10)

Decoding happens line by line so that a line which is not valid UTF-8 in a file
declared as UTF-8 can be decoded with the 8-bit fallback instead of failing.
"""

import io
import os
import re
from collections import deque
from typing import Deque, Iterator, List, Optional, Tuple

from ..core.constants import (
    CHARSET_CODECS,
    DEFAULT_CHARSET,
    HEADER_SCAN_LINES,
    ND7_TRANSLATION,
    UTF8_BOM,
)
from ..utils.logging import make_debug_logger

_log = make_debug_logger("[ENCODING]")

_CHARSET_DECLARATION = re.compile(rb"\.\.TEGNSETT\s+[\"']?([A-Za-z0-9_\-]+)")
_OBJECT_START = re.compile(rb"^\s*\.(?!\.)(?!HODE)[^\s.]")


class ByteSource:
    """
    Line-oriented reader over a binary source with byte accounting.

    Accepts a file path, an open binary stream or a bytes object. The total size
    is known for paths and seekable streams; for other streams it is None and
    progress cannot be computed.

    Attributes:
        name: Path or stream name used in log messages
        total_size: Number of bytes from the starting position to the end, or None
        consumed: Number of bytes handed out by readline()
    """

    def __init__(self, source):
        self._pending: Deque[bytes] = deque()
        self.consumed = 0

        if isinstance(source, (str, os.PathLike)):
            self.name = os.fspath(source)
            self._fh = open(source, "rb")
            try:
                self.total_size: Optional[int] = os.fstat(self._fh.fileno()).st_size
            except BaseException:
                self._fh.close()
                raise
        elif isinstance(source, (bytes, bytearray)):
            self.name = "<bytes>"
            self._fh = io.BytesIO(bytes(source))
            self.total_size = len(source)
        elif hasattr(source, "read"):
            self.name = str(getattr(source, "name", "<stream>"))
            self._fh = source
            self.total_size = _remaining_size(source)
        else:
            raise TypeError(f"Unsupported SOSI source: {type(source).__name__}")

    def peek_lines(self, count: int) -> List[bytes]:
        """
        Read ahead up to ``count`` physical lines without consuming them.

        Args:
            count: Maximum number of lines to look at

        Returns:
            The lines (with line endings) that readline() will return next
        """
        while len(self._pending) < count:
            line = self._fh.readline()
            if not line:
                break
            if isinstance(line, str):
                raise TypeError("SOSI sources must be opened in binary mode")
            self._pending.append(line)
        return list(self._pending)[:count]

    def skip_prefix(self, prefix: bytes) -> bool:
        """Drop ``prefix`` from the next line if present (used for the BOM)."""
        self.peek_lines(1)
        if self._pending and self._pending[0].startswith(prefix):
            self._pending[0] = self._pending[0][len(prefix):]
            self.consumed += len(prefix)
            return True
        return False

    def readline(self) -> Tuple[int, bytes]:
        """
        Return the next physical line and the byte offset where it starts.

        Returns:
            (offset, line); line is ``b""`` at end of input
        """
        offset = self.consumed
        if self._pending:
            line = self._pending.popleft()
        else:
            line = self._fh.readline()
            if isinstance(line, str):
                raise TypeError("SOSI sources must be opened in binary mode")
        self.consumed += len(line)
        return offset, line

    def close(self) -> None:
        self._pending.clear()
        if not self._fh.closed:
            self._fh.close()

    @property
    def closed(self) -> bool:
        return self._fh.closed


def _remaining_size(stream) -> Optional[int]:
    """Bytes left in ``stream``, or None when the stream cannot tell."""
    try:
        return os.fstat(stream.fileno()).st_size - stream.tell()
    except (AttributeError, OSError, io.UnsupportedOperation):
        pass
    try:
        if stream.seekable():
            current = stream.tell()
            end = stream.seek(0, io.SEEK_END)
            stream.seek(current)
            return end - current
    except (AttributeError, OSError, io.UnsupportedOperation):
        pass
    return None


def normalize_charset_name(name: str) -> str:
    return name.strip().strip("\"'").upper()


def detect_charset(
    lines: List[bytes],
    default: str = DEFAULT_CHARSET,
    debug: bool = False,
) -> Tuple[str, bool]:
    """
    Decide the charset of a file from its first physical lines.

    Args:
        lines: First physical lines of the file (raw bytes)
        default: Charset used when neither BOM nor declaration is found
        debug: Enable debug logging

    Returns:
        Tuple of (charset_name, has_bom); charset_name is a TEGNSETT-style name

    Example:
        >>> detect_charset([b".HODE\\n", b"..TEGNSETT UTF-8\\n"])
        ('UTF-8', False)
    """
    if lines and lines[0].startswith(UTF8_BOM):
        _log("UTF-8 byte-order mark found", debug)
        return "UTF-8", True

    for index, line in enumerate(lines):
        if index > 0 and _OBJECT_START.match(line):
            break
        match = _CHARSET_DECLARATION.search(line)
        if match:
            declared = normalize_charset_name(match.group(1).decode("ascii"))
            _log(f"Declared charset: {declared}", debug)
            return declared, False

    _log(f"No charset declaration, using {default}", debug)
    return normalize_charset_name(default), False


class LineDecoder:
    """
    Decode physical lines with a fixed charset and a per-line 8-bit fallback.

    Attributes:
        charset: TEGNSETT-style name the decoder was built for
        codec: Python codec used for decoding ("nd7" for 7-bit Norwegian)
        fallback_codec: 8-bit codec used when a UTF-8 line does not decode
        fallback_count: Number of lines decoded with the fallback codec
    """

    def __init__(self, charset: str, default: str = DEFAULT_CHARSET, debug: bool = False):
        self.charset = normalize_charset_name(charset)
        self.debug = debug
        default_codec = CHARSET_CODECS.get(normalize_charset_name(default), "iso8859_10")
        if self.charset not in CHARSET_CODECS:
            _log(f"Unknown charset {self.charset!r}, using {default}", debug)
        self.codec = CHARSET_CODECS.get(self.charset, default_codec)
        self.fallback_codec = default_codec if default_codec not in ("utf-8", "nd7") else "iso8859_10"
        self.fallback_count = 0

    def decode(self, raw: bytes) -> str:
        """Decode one physical line, without its line ending."""
        raw = raw.rstrip(b"\r\n")
        if self.codec == "utf-8":
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError:
                self.fallback_count += 1
                _log(f"Line is not valid UTF-8, decoding as {self.fallback_codec}", self.debug)
                return raw.decode(self.fallback_codec, errors="replace")
        if self.codec == "nd7":
            return raw.decode("ascii", errors="replace").translate(ND7_TRANSLATION)
        return raw.decode(self.codec, errors="replace")


def open_byte_source(
    source,
    default_charset: str = DEFAULT_CHARSET,
    scan_lines: int = HEADER_SCAN_LINES,
    debug: bool = False,
) -> Tuple[ByteSource, LineDecoder]:
    """
    Open a byte source and pick its decoder.

    Args:
        source: File path, binary stream or bytes
        default_charset: Charset used when the file declares none
        scan_lines: Number of lines searched for a TEGNSETT declaration
        debug: Enable debug logging

    Returns:
        Tuple of (byte_source, line_decoder); a BOM has already been skipped

    Raises:
        OSError: If the source cannot be opened or read
    """
    byte_source = ByteSource(source)
    try:
        charset, has_bom = detect_charset(
            byte_source.peek_lines(scan_lines), default_charset, debug
        )
        if has_bom:
            byte_source.skip_prefix(UTF8_BOM)
    except BaseException:
        byte_source.close()
        raise
    return byte_source, LineDecoder(charset, default_charset, debug)


def iter_decoded_lines(
    byte_source: ByteSource,
    decoder: LineDecoder,
) -> Iterator[Tuple[int, int, str]]:
    """
    Yield decoded physical lines.

    Yields:
        Tuple of (line_number, byte_offset, text) with line endings removed
    """
    line_number = 0
    while True:
        offset, raw = byte_source.readline()
        if not raw:
            return
        line_number += 1
        yield line_number, offset, decoder.decode(raw)
