import pytest
from pydantic import ValidationError

from src.dynamic_maps.schemas.dna import (
    FitRecord,
    MapRecord,
    StylesRecord,
    ZoomRecord,
    dna_to_json,
    dump_dna,
    parse_dna,
)


def test_parse_dna_dispatches_on_type():
    records = parse_dna(
        [
            {"type": "map", "locations": [{"lat": 1, "lng": 2}], "options": {"id": "m"}},
            {"type": "zoom", "level": 4},
            {"type": "fit"},
        ]
    )

    assert isinstance(records[0], MapRecord)
    assert isinstance(records[1], ZoomRecord)
    assert isinstance(records[2], FitRecord)


def test_parse_dna_accepts_json():
    records = parse_dna('[{"type":"showMarker","markerId":"7-home"}]')

    assert dump_dna(records) == [{"type": "showMarker", "markerId": "7-home"}]


def test_parse_dna_rejects_unknown_type():
    with pytest.raises(ValidationError):
        parse_dna([{"type": "explode"}])


def test_records_are_frozen():
    record = ZoomRecord(level=3)

    with pytest.raises(ValidationError):
        record.level = 4


def test_styles_record_keeps_camel_case_key():
    record = StylesRecord(styleSet=[{"elementType": "geometry"}])

    assert dna_to_json([record]) == '[{"type":"styles","styleSet":[{"elementType":"geometry"}]}]'
