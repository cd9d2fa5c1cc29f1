"""
AgroSpace CLI entrypoint.

Answers the same four field queries as the HTTP API, directly against the KML
documents configured in settings. Handy for checking a new data drop before
deploying it.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from agrospace.catalog.fields import FieldCatalog, UnknownFieldError
from agrospace.config.settings import get_settings
from agrospace.core.logging import configure_logging
from agrospace.domain.models import FieldResponse


def _build_catalog(args: argparse.Namespace) -> FieldCatalog:
    settings = get_settings()
    catalog = FieldCatalog.from_settings(settings)
    return FieldCatalog(
        args.fields_path or catalog.fields_path,
        args.centroids_path or catalog.centroids_path,
        namespace=catalog.namespace,
    )


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _cmd_fields(args: argparse.Namespace) -> int:
    catalog = _build_catalog(args)
    fields = catalog.get_all_fields()
    if args.json:
        _print_json([FieldResponse.from_field(f).model_dump(mode="json") for f in fields])
        return 0

    print(f"{len(fields)} fields")
    for f in fields:
        print(f"{f.id:>6}  {f.name}  size={f.size}  center=({f.center.lat:.6f}, {f.center.lng:.6f})  points={len(f.polygon)}")
    return 0


def _cmd_size(args: argparse.Namespace) -> int:
    catalog = _build_catalog(args)
    size = catalog.get_field_size(int(args.field_id))
    if size is None:
        print(f"Field {args.field_id} not found", file=sys.stderr)
        return 1
    if args.json:
        _print_json({"id": int(args.field_id), "size": size})
    else:
        print(size)
    return 0


def _cmd_distance(args: argparse.Namespace) -> int:
    catalog = _build_catalog(args)
    try:
        distance = catalog.calculate_distance(int(args.field_id), float(args.lat), float(args.lng))
    except UnknownFieldError as e:
        print(str(e), file=sys.stderr)
        return 1
    if args.json:
        _print_json({"id": int(args.field_id), "distance_m": distance})
    else:
        print(f"{distance:.2f}")
    return 0


def _cmd_locate(args: argparse.Namespace) -> int:
    catalog = _build_catalog(args)
    result = catalog.is_point_in_field(float(args.lat), float(args.lng))
    if args.json:
        _print_json(result.model_dump() if result is not None else False)
        return 0 if result is not None else 1
    if result is None:
        print("No field contains this point", file=sys.stderr)
        return 1
    print(f"{result.id}  {result.name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the AgroSpace CLI."""
    parser = argparse.ArgumentParser(prog="agrospace")
    parser.add_argument("--fields-path", type=str, default=None, help="Override the boundary KML path.")
    parser.add_argument("--centroids-path", type=str, default=None, help="Override the centroid KML path.")
    parser.add_argument("--log-level", type=str, default=None, help="Override app.log_level (e.g. DEBUG).")
    sub = parser.add_subparsers(dest="command", required=True)

    fields = sub.add_parser("fields", help="List all loaded fields.")
    fields.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    fields.set_defaults(func=_cmd_fields)

    size = sub.add_parser("size", help="Print the size of one field.")
    size.add_argument("field_id", type=int)
    size.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    size.set_defaults(func=_cmd_size)

    dist = sub.add_parser("distance", help="Meters from a field's centroid to a point.")
    dist.add_argument("field_id", type=int)
    dist.add_argument("--lat", required=True, type=float)
    dist.add_argument("--lng", required=True, type=float)
    dist.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    dist.set_defaults(func=_cmd_distance)

    loc = sub.add_parser("locate", help="Find the field containing a point.")
    loc.add_argument("--lat", required=True, type=float)
    loc.add_argument("--lng", required=True, type=float)
    loc.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    loc.set_defaults(func=_cmd_locate)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m agrospace.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
