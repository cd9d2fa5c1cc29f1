"""
KML field document parsing.

Two documents feed the field catalog:
- the boundary document: one `Placemark` per field, with a
  `Polygon/outerBoundaryIs/LinearRing/coordinates` ring and
  `ExtendedData/SchemaData/SimpleData` entries named `fid` and `size`;
- the centroid document: one `Placemark` per field, with a `Point/coordinates`
  location and the same `fid` metadata.

Malformed placemarks are skipped (logged at DEBUG) and never raise. Missing or
unparseable documents raise from `load_kml()`.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from agrospace.config.settings import KML_NAMESPACE
from agrospace.domain.models import FieldBoundary, Location

logger = logging.getLogger(__name__)

KmlDocument = ET.ElementTree | ET.Element

_POLYGON_PATH = "kml:Polygon/kml:outerBoundaryIs/kml:LinearRing/kml:coordinates"
_POINT_PATH = "kml:Point/kml:coordinates"
_SIMPLE_DATA_PATH = "kml:ExtendedData/kml:SchemaData"


def _try_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _try_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return "".join(element.itertext())


def parse_coordinates(text: str) -> list[Location]:
    """Parse a KML `coordinates` string into locations.

    Tokens are whitespace separated `lng,lat[,alt]` triples; note the order swap
    into `Location(lat, lng)`. Malformed tokens are dropped.
    """
    locations: list[Location] = []
    for token in (text or "").split():
        parts = token.split(",")
        if len(parts) < 2:
            continue
        lng = _try_float(parts[0])
        lat = _try_float(parts[1])
        if lng is None or lat is None:
            continue
        locations.append(Location(lat=lat, lng=lng))
    return locations


def _simple_data(placemark: ET.Element, ns: dict[str, str]) -> list[ET.Element]:
    schema_data = placemark.find(_SIMPLE_DATA_PATH, ns)
    if schema_data is None:
        return []
    return schema_data.findall("kml:SimpleData", ns)


def _parse_extended_data(placemark: ET.Element, ns: dict[str, str]) -> tuple[int, float]:
    """Return `(fid, size)`; absent or unparseable values keep their defaults (0, 0.0)."""
    field_id = 0
    size = 0.0
    for simple_data in _simple_data(placemark, ns):
        name = simple_data.get("name")
        value = _text(simple_data)
        if name == "fid":
            parsed_id = _try_int(value)
            if parsed_id is not None:
                field_id = parsed_id
        elif name == "size":
            parsed_size = _try_float(value)
            if parsed_size is not None:
                size = parsed_size
    return field_id, size


def _parse_id(placemark: ET.Element, ns: dict[str, str]) -> int:
    for simple_data in _simple_data(placemark, ns):
        if simple_data.get("name") == "fid":
            parsed = _try_int(_text(simple_data))
            if parsed is not None:
                return parsed
    return 0


def _parse_boundary(placemark: ET.Element, ns: dict[str, str]) -> FieldBoundary | None:
    name = _text(placemark.find("kml:name", ns)) or ""
    field_id, size = _parse_extended_data(placemark, ns)

    coordinates_text = _text(placemark.find(_POLYGON_PATH, ns))
    if coordinates_text is None:
        logger.debug("No polygon coordinates for field %s (%s); skipped.", field_id, name)
        return None

    polygon = parse_coordinates(coordinates_text)
    if not polygon:
        logger.debug("Failed to parse polygon for field %s (%s); skipped.", field_id, name)
        return None

    if field_id <= 0:
        logger.debug("Skipped field with invalid id: %r", name)
        return None

    return FieldBoundary(id=field_id, name=name, size=size, polygon=tuple(polygon))


def parse_field_boundaries(doc: KmlDocument, *, namespace: str = KML_NAMESPACE) -> list[FieldBoundary]:
    """Parse every boundary placemark of `doc` in document order."""
    ns = {"kml": namespace}
    placemarks = list(doc.iter(f"{{{namespace}}}Placemark"))
    logger.info("Found %d placemarks in boundary document.", len(placemarks))

    boundaries: list[FieldBoundary] = []
    for placemark in placemarks:
        boundary = _parse_boundary(placemark, ns)
        if boundary is None:
            continue
        boundaries.append(boundary)
        logger.debug(
            "Added field: %s - %s - %s (%d points)", boundary.id, boundary.name, boundary.size, len(boundary.polygon)
        )
    return boundaries


def parse_centroids(doc: KmlDocument, *, namespace: str = KML_NAMESPACE) -> dict[int, Location]:
    """Parse centroid placemarks into `fid -> Location` (last placemark wins per id)."""
    ns = {"kml": namespace}
    centroids: dict[int, Location] = {}
    for placemark in doc.iter(f"{{{namespace}}}Placemark"):
        field_id = _parse_id(placemark, ns)
        if field_id == 0:
            continue

        coordinates_text = _text(placemark.find(_POINT_PATH, ns))
        if coordinates_text is None:
            logger.debug("No point coordinates for centroid %s; skipped.", field_id)
            continue

        points = parse_coordinates(coordinates_text)
        if not points:
            logger.debug("Failed to parse point for centroid %s; skipped.", field_id)
            continue

        centroids[field_id] = points[0]
    return centroids


def load_kml(path: str | Path) -> ET.ElementTree:
    """Read a KML document from disk.

    Raises `FileNotFoundError` when the file is missing and `ET.ParseError` when
    it is not well-formed XML.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"KML file not found: {p}")
    return ET.parse(p)
