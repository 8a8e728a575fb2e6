#!/usr/bin/env python3
"""
Summarise a SOSI file and optionally export it as GeoJSON.
"""

from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path

from shapely.geometry import mapping

from .config import configure_logging
from .core.errors import SosiFormatError
from .streaming.reader import ReaderConfig, SosiReader


def feature_to_geojson(feature) -> dict:
    """Convert a Feature to a GeoJSON Feature dict (null geometry when empty)."""
    return {
        "type": "Feature",
        "id": feature.id,
        "properties": dict(feature.attributes),
        "geometry": None if feature.geometry.is_empty else mapping(feature.geometry),
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Summarise a SOSI file.")
    parser.add_argument("path", help="SOSI file to read.")
    parser.add_argument(
        "--geojson",
        help="Write all features to this GeoJSON file.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Stop after this many features.",
    )
    parser.add_argument(
        "--objtype",
        action="append",
        help="Only read features with this OBJTYPE (repeatable).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log per-feature problems.",
    )
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.debug else None)
    config = ReaderConfig(debug=args.debug, limit=args.limit, objtypes=args.objtype)

    try:
        reader = SosiReader(args.path, config)
    except (OSError, SosiFormatError) as e:
        raise SystemExit(f"Cannot read {args.path}: {e}")

    geometry_types: Counter = Counter()
    objtypes: Counter = Counter()
    geojson_features = []
    with reader:
        for feature in reader:
            geometry_types[feature.geometry_type.value] += 1
            objtypes[feature.get("OBJTYPE", "-")] += 1
            if args.geojson:
                geojson_features.append(feature_to_geojson(feature))
        stats = reader.stats

    print(f"File:        {args.path}")
    print(f"CRS:         {reader.get_crs()}")
    print(f"ENHET:       {reader.get_xy_factor()}")
    print(f"Charset:     {reader.charset}")
    print(f"Features:    {stats.features} (errors: {stats.errors})")
    for name, count in sorted(geometry_types.items()):
        print(f"  {name:<10} {count}")
    print("OBJTYPE:")
    for name, count in objtypes.most_common():
        print(f"  {name:<30} {count}")

    if args.geojson:
        target = Path(args.geojson)
        collection = {
            "type": "FeatureCollection",
            "crs": {"type": "name", "properties": {"name": reader.get_crs()}},
            "features": geojson_features,
        }
        target.write_text(json.dumps(collection, ensure_ascii=False), encoding="utf-8")
        print(f"Wrote {len(geojson_features)} features to {target}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
