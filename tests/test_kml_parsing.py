import xml.etree.ElementTree as ET

import pytest

from agrospace.domain.models import Location
from agrospace.ingestion.kml import load_kml, parse_centroids, parse_coordinates, parse_field_boundaries
from kml_builders import boundary_placemark, centroid_placemark, kml_document


def _doc(*placemarks: str) -> ET.Element:
    return ET.fromstring(kml_document(*placemarks))


def test_parse_coordinates_swaps_lng_lat_and_keeps_order():
    locs = parse_coordinates(" 45.70,41.35,0\n\t45.71,41.36 45.72,41.37,12.5 ")
    assert locs == [
        Location(lat=41.35, lng=45.70),
        Location(lat=41.36, lng=45.71),
        Location(lat=41.37, lng=45.72),
    ]


def test_parse_coordinates_skips_malformed_tokens():
    locs = parse_coordinates("1,2 abc 3 x,4 5,y 6,7,8")
    assert locs == [Location(lat=2, lng=1), Location(lat=7, lng=6)]


@pytest.mark.parametrize("text", ["", "   ", "a,b c d,e"])
def test_parse_coordinates_empty_or_garbage(text):
    assert parse_coordinates(text) == []


def test_parse_field_boundaries_reads_name_id_size_polygon():
    doc = _doc(boundary_placemark(name="North", fid="7", size="12.5"))
    [b] = parse_field_boundaries(doc)
    assert b.id == 7
    assert b.name == "North"
    assert b.size == 12.5
    assert len(b.polygon) == 4
    assert b.polygon[1] == Location(lat=0, lng=10)


def test_parse_field_boundaries_skips_invalid_placemarks():
    doc = _doc(
        boundary_placemark(name="no fid", fid=None),
        boundary_placemark(name="zero fid", fid="0"),
        boundary_placemark(name="negative fid", fid="-3"),
        boundary_placemark(name="bad fid", fid="seven"),
        boundary_placemark(name="no polygon", fid="4", coords=None),
        boundary_placemark(name="garbage polygon", fid="5", coords="x,y"),
        boundary_placemark(name="ok", fid="6"),
    )
    assert [b.name for b in parse_field_boundaries(doc)] == ["ok"]


def test_parse_field_boundaries_missing_size_defaults_to_zero():
    doc = _doc(boundary_placemark(fid="3", size=None))
    [b] = parse_field_boundaries(doc)
    assert b.size == 0.0


def test_parse_field_boundaries_accepts_element_tree():
    tree = ET.ElementTree(_doc(boundary_placemark(fid="2")))
    assert [b.id for b in parse_field_boundaries(tree)] == [2]


def test_parse_centroids_takes_first_point_and_last_id_wins():
    doc = _doc(
        centroid_placemark(fid="1", coords="5,6 7,8"),
        centroid_placemark(fid="2", coords="1,1"),
        centroid_placemark(fid="2", coords="2,3"),
    )
    centroids = parse_centroids(doc)
    assert centroids == {1: Location(lat=6, lng=5), 2: Location(lat=3, lng=2)}


def test_parse_centroids_skips_invalid_placemarks():
    doc = _doc(
        centroid_placemark(fid=None),
        centroid_placemark(fid="0"),
        centroid_placemark(fid="3", coords=None),
        centroid_placemark(fid="4", coords="nope"),
    )
    assert parse_centroids(doc) == {}


def test_parse_ignores_other_namespaces():
    doc = ET.fromstring(
        '<kml xmlns="http://earth.google.com/kml/2.1"><Placemark><name>x</name></Placemark></kml>'
    )
    assert parse_field_boundaries(doc) == []
    assert parse_centroids(doc) == {}


def test_load_kml_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_kml(tmp_path / "missing.kml")


def test_load_kml_malformed_xml_raises(tmp_path):
    p = tmp_path / "broken.kml"
    p.write_text("<kml><Placemark>", encoding="utf-8")
    with pytest.raises(ET.ParseError):
        load_kml(p)
