"""Tests for the sosi-info command line tool."""

import json

import pytest

from sosi.cli import main


def test_summary(sample_path, capsys):
    assert main([str(sample_path)]) == 0

    out = capsys.readouterr().out
    assert "EPSG:25833" in out
    assert "ENHET:       0.01" in out
    assert "Features:    4 (errors: 0)" in out
    assert "Innsjø" in out


def test_geojson_export(sample_path, tmp_path, capsys):
    target = tmp_path / "out.geojson"
    assert main([str(sample_path), "--geojson", str(target)]) == 0

    collection = json.loads(target.read_text(encoding="utf-8"))
    assert collection["crs"]["properties"]["name"] == "EPSG:25833"
    features = {f["id"]: f for f in collection["features"]}
    assert set(features) == {1, 12, 5763, 7}
    assert features[1]["geometry"]["type"] == "Point"
    assert features[5763]["geometry"]["type"] == "Polygon"
    assert features[7]["geometry"] is None
    assert features[7]["properties"]["STRENG"] == "Fønhuskoia"
    assert "Wrote 4 features" in capsys.readouterr().out


def test_objtype_and_limit(sample_path, capsys):
    main([str(sample_path), "--objtype", "Adresse", "--objtype", "Innsjø"])
    assert "Features:    2" in capsys.readouterr().out

    main([str(sample_path), "--limit", "1"])
    assert "Features:    1" in capsys.readouterr().out


def test_unreadable_file(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / "missing.sos")])
    assert "Cannot read" in str(excinfo.value)
