import html
import json
import re

import pytest

from src.dynamic_maps.config import settings
from src.dynamic_maps.models.domain import Location
from src.dynamic_maps.models.dynamic_map import (
    DynamicMap,
    EmptyDna,
    InvalidDnaHead,
    MisconfiguredModel,
)
from src.dynamic_maps.services.view import POS_END, View


def _embedded_dna(markup: str) -> list:
    match = re.search(r'data-dna="([^"]*)"', markup)
    assert match, "Expected a data-dna attribute"
    return json.loads(html.unescape(match.group(1)))


def test_scenario_zoom_and_fit():
    dynamic_map = DynamicMap([{"lat": 10, "lng": 20}], {"id": "my-map"})

    markup = dynamic_map.zoom(5).fit().tag()

    expected = [
        {"type": "map", "locations": [{"lat": 10, "lng": 20}], "options": {"id": "my-map", "js": True}},
        {"type": "zoom", "level": 5},
        {"type": "fit"},
    ]
    assert dynamic_map.dna_payload() == expected
    assert _embedded_dna(markup) == expected
    assert 'id="my-map"' in markup
    assert 'class="gm-map"' in markup


def test_empty_map_still_renders():
    dynamic_map = DynamicMap([])

    markup = dynamic_map.tag()

    assert dynamic_map.dna_payload()[0]["locations"] == []
    assert markup.startswith("<div ")


def test_generated_id_is_stable():
    dynamic_map = DynamicMap()

    assert re.fullmatch(r"map-[A-Za-z0-9]{6}", dynamic_map.id)
    assert dynamic_map.dna_payload()[0]["options"]["id"] == dynamic_map.id
    dynamic_map.zoom(3).fit()
    assert dynamic_map.id == dynamic_map.dna_payload()[0]["options"]["id"]
    assert DynamicMap().id != dynamic_map.id


def test_options_are_normalized_without_touching_caller_dict():
    options = {"zoom": 4, "js": "yes"}

    dynamic_map = DynamicMap(None, options)
    head = dynamic_map.dna_payload()[0]

    assert options == {"zoom": 4, "js": "yes"}
    assert head["options"]["js"] is True
    assert head["options"]["zoom"] == 4
    assert DynamicMap(None, "not options").dna_payload()[0]["options"]["js"] is True


def test_js_preload_registers_asset_bundle():
    view = View()
    DynamicMap(None, {"id": "a"}, view=view)

    quiet_view = View()
    DynamicMap(None, {"id": "b", "js": False}, view=quiet_view)

    assert view.asset_bundles == [settings.js_api_bundle]
    assert quiet_view.asset_bundles == []


def test_dev_mode_enables_js_logging(monkeypatch):
    monkeypatch.setattr(settings, "dev_mode", True)
    view = View()

    DynamicMap(None, view=view)

    assert "googleMaps.log = true;" in view.get_js(POS_END)


def test_chain_preserves_call_order():
    dynamic_map = (
        DynamicMap({"lat": 1, "lng": 2}, {"id": "chain"})
        .markers([{"lat": 3, "lng": 4}], {"icon": "pin.png"})
        .kml("https://example.com/layer.kml")
        .styles([{"featureType": "water", "stylers": [{"color": "#0000ff"}]}])
        .zoom(8)
        .center({"lat": 5, "lng": 6})
        .fit()
        .refresh()
        .pan_to_marker("7-home")
        .set_marker_icon("7-home", "star.png")
        .hide_marker("7-home")
        .show_marker("7-home")
    )

    dna = dynamic_map.dna_payload()

    assert [segment["type"] for segment in dna] == [
        "map",
        "markers",
        "kml",
        "styles",
        "zoom",
        "center",
        "fit",
        "refresh",
        "panToMarker",
        "setMarkerIcon",
        "hideMarker",
        "showMarker",
    ]
    assert dna[1] == {"type": "markers", "locations": [{"lat": 3, "lng": 4}], "options": {"icon": "pin.png"}}
    assert dna[2] == {"type": "kml", "url": "https://example.com/layer.kml", "options": {}}
    assert dna[8] == {"type": "panToMarker", "markerId": "7-home"}
    assert dna[9] == {"type": "setMarkerIcon", "markerId": "7-home", "icon": "star.png"}


def test_invalid_chained_calls_are_silent_noops():
    dynamic_map = DynamicMap(None, {"id": "noop"})

    result = dynamic_map.markers(None).kml("").styles([]).styles("dark").center([]).center(None)

    assert result is dynamic_map
    assert len(dynamic_map.get_dna()) == 1


def test_center_accepts_location_value_object():
    dynamic_map = DynamicMap().center(Location(lat=21.5, lng=39.2))

    assert dynamic_map.dna_payload()[-1] == {"type": "center", "coords": {"lat": 21.5, "lng": 39.2}}


def test_tag_registers_init_script_unless_suppressed():
    view = View()
    dynamic_map = DynamicMap(None, {"id": "init-me"}, view=view)

    dynamic_map.tag(init=False)
    assert view.get_js(POS_END) == []

    dynamic_map.tag()
    assert view.get_js(POS_END) == [
        "addEventListener('load', function(){googleMaps.init(\"init-me\")});"
    ]


def test_tag_does_not_mutate_dna():
    dynamic_map = DynamicMap({"lat": 1, "lng": 2}).zoom(3)
    before = dynamic_map.dna_payload()

    dynamic_map.tag()

    assert dynamic_map.dna_payload() == before


def test_tag_fails_on_empty_dna():
    dynamic_map = DynamicMap.from_dna([], "empty")

    with pytest.raises(EmptyDna):
        dynamic_map.tag()


def test_tag_fails_when_chain_does_not_start_with_map():
    dynamic_map = DynamicMap.from_dna([{"type": "zoom", "level": 3}, {"type": "fit"}], "headless")

    with pytest.raises(InvalidDnaHead) as excinfo:
        dynamic_map.tag()

    assert isinstance(excinfo.value, MisconfiguredModel)
    assert isinstance(excinfo.value, ValueError)


def test_from_dna_round_trips_rendered_markup():
    original = DynamicMap({"lat": 1, "lng": 2}, {"id": "stored"}).zoom(4)

    restored = DynamicMap.from_dna(original.dna_payload(), "stored")

    assert restored.tag() == original.tag()


def test_get_dna_returns_a_copy():
    dynamic_map = DynamicMap({"lat": 1, "lng": 2})

    dna = dynamic_map.get_dna()
    dna.append(dna[0])
    dna[0].options["id"] = "changed"

    assert len(dynamic_map.get_dna()) == 1
    assert dynamic_map.get_dna()[0].options["id"] == dynamic_map.id


def test_str_hints_at_tag():
    assert "tag()" in str(DynamicMap())


def test_non_string_keys_do_not_break_the_chain():
    dynamic_map = DynamicMap(None, {"id": "keys", 1: "one"})

    dynamic_map.styles({1: {"color": "red"}}).markers([{"lat": 1, "lng": 2, 0: "x"}])
    dna = dynamic_map.dna_payload()

    assert dna[0]["options"]["1"] == "one"
    assert dna[1] == {"type": "styles", "styleSet": {"1": {"color": "red"}}}
    assert dna[2]["locations"] == [{"lat": 1, "lng": 2, "0": "x"}]


def test_caller_mutation_after_call_leaves_dna_untouched():
    coords = {"lat": 1, "lng": 2}
    marker = {"lat": 3, "lng": 4}
    marker_options = {"icon": {"url": "pin.png"}}
    dynamic_map = DynamicMap(None, {"id": "frozen"}).center(coords).markers([marker], marker_options)

    coords["lat"] = 99
    marker["lng"] = 99
    marker_options["icon"]["url"] = "other.png"
    dna = dynamic_map.dna_payload()

    assert dna[1]["coords"] == {"lat": 1, "lng": 2}
    assert dna[2]["locations"] == [{"lat": 3, "lng": 4}]
    assert dna[2]["options"] == {"icon": {"url": "pin.png"}}


def test_center_skips_location_without_coords():
    dynamic_map = DynamicMap(None, {"id": "nowhere"}).center(Location()).center(Location(lat=21.5))

    assert len(dynamic_map.get_dna()) == 1


def test_init_script_quotes_the_map_id():
    view = View()
    map_id = "x');alert(1);('</script>"

    DynamicMap(None, {"id": map_id}, view=view).tag()

    script = view.get_js(POS_END)[0]
    assert "googleMaps.init(\"x');alert(1);('\\u003c/script>\")" in script
    assert "</script>" not in script
