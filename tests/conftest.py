"""Shared fixtures: small SOSI documents written to temporary files."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


SAMPLE_SOSI = """.HODE
..TEGNSETT UTF-8
..TRANSPAR
...KOORDSYS 23
...ORIGO-NØ 0 0
...ENHET 0.01
..OMRÅDE
...MIN-NØ 6645000 253000
...MAX-NØ 6647000 255000
..SOSI-VERSJON 4.0
..SOSI-NIVÅ 2
.PUNKT 1:
..OBJTYPE Adresse
..KOMM 0219
..GATENAVN "Hans Hanssens vei !nocomment"
..HUSNR 4
..POSTNAVN "SNARØYA"
..NØ
664591976 25367399
.KURVE 12:
..OBJTYPE Arealdekkeavgrensning
..NØ
664500000 25300000 ...KP 1
664500000 25310000
664510000 25310000
.KURVE 45:
..NØ
664500000 25300000
664510000 25300000
664510000 25310000
.FLATE 5763:
..OBJTYPE Innsjø
..REF :12 :-45
..NØ
664505000 25305000
.TEKST 7:
..OBJTYPE Skrivemåte
..STRENG "Fønhuskoia"
.SLUTT
"""


@pytest.fixture
def sample_text():
    """The sample document as text."""
    return SAMPLE_SOSI


@pytest.fixture
def write_sosi(tmp_path):
    """
    Factory fixture writing SOSI text to a temporary file.

    Usage: write_sosi(text, encoding="utf-8", bom=False, name="sample.sos")
    """
    def _write(text, encoding="utf-8", bom=False, name="sample.sos"):
        data = text.encode(encoding)
        if bom:
            data = b"\xef\xbb\xbf" + data
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def sample_path(write_sosi, sample_text):
    """Path of the sample document encoded as UTF-8 without BOM."""
    return write_sosi(sample_text)
