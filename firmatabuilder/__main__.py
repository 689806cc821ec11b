"""
FirmataBuilder — entry point.

Usage:
    python -m firmatabuilder generate --feature DigitalInputFirmata --feature ServoFirmata
    python -m firmatabuilder generate --selection selection.json --out sketches/
    python -m firmatabuilder features
    python -m firmatabuilder serve --port 3000
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from firmatabuilder.catalog import load_catalog
from firmatabuilder.config import settings
from firmatabuilder.errors import FirmataBuilderError
from firmatabuilder.generator import generate, generate_sketch
from firmatabuilder.selection import UserSelection, make_selection, parse_selection


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="firmatabuilder", description="Feature selection → ConfiguredFirmata sketch (.ino)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Generate a sketch from selected features")
    g.add_argument("--selection", default=None, help="Path to a selection JSON file")
    g.add_argument("--feature", action="append", dest="features", default=None,
                   help="Feature to include (repeatable, in order); defaults to the reference set")
    g.add_argument("--filename", default=None, help="Sketch name without extension")
    g.add_argument("--baud", type=int, default=None, help="Serial baud rate")
    g.add_argument("--catalog", default=None, help="Directory of feature JSON files")
    g.add_argument("--out", default=None, help="Output directory")
    g.add_argument("--stdout", action="store_true", help="Print the sketch instead of writing it")

    f = sub.add_parser("features", help="List the features in the catalog")
    f.add_argument("--catalog", default=None, help="Directory of feature JSON files")

    sv = sub.add_parser("serve", help="Start the web server")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    return p


def _selection_from_args(args: argparse.Namespace) -> UserSelection:
    if args.selection:
        data = json.loads(Path(args.selection).read_text(encoding="utf-8"))
        selection = parse_selection(data)
        if args.filename is None and args.baud is None:
            return selection
        return make_selection(
            selection.selected_features,
            filename=args.filename if args.filename is not None else selection.filename,
            baud=args.baud if args.baud is not None else selection.connection.baud,
        )
    features = args.features if args.features is not None else settings.default_features
    return make_selection(features, filename=args.filename, baud=args.baud)


def _cmd_generate(args: argparse.Namespace) -> int:
    catalog = load_catalog(Path(args.catalog) if args.catalog else None)
    selection = _selection_from_args(args)

    if args.stdout:
        sys.stdout.write(generate_sketch(catalog.by_name(), selection))
        return 0

    out_dir = Path(args.out).resolve() if args.out else None
    path = generate(catalog.by_name(), selection, output_dir=out_dir)
    print(f"✅ Generated sketch: {path}")
    return 0


def _cmd_features(args: argparse.Namespace) -> int:
    catalog = load_catalog(Path(args.catalog) if args.catalog else None)
    for feat in catalog.features:
        flags = []
        if feat.reporting:
            flags.append("reporting")
        if feat.update:
            flags.append("update")
        if feat.capability:
            flags.append(feat.capability.value)
        print(f"{feat.name:<22} {feat.instance_name:<14} {', '.join(flags)}")
    for err in catalog.errors:
        print(f"  ! {err}", file=sys.stderr)
    return 0 if catalog.ok else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.cmd == "generate":
            return _cmd_generate(args)
        if args.cmd == "features":
            return _cmd_features(args)
    except (FirmataBuilderError, OSError, json.JSONDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.cmd == "serve":
        from firmatabuilder.web.server import main as serve_main
        serve_main(host=args.host, port=args.port)
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
