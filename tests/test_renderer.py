import xml.etree.ElementTree as ET

import pytest
import yaml

from gemstats.renderer import Format, render, split_format_suffix, to_xml, to_yaml


@pytest.mark.parametrize(
    "identifier, expected",
    [
        ("rake-1.0.0.json", ("rake-1.0.0", Format.json)),
        ("rake-1.0.0.xml", ("rake-1.0.0", Format.xml)),
        ("rake-1.0.0.yaml", ("rake-1.0.0", Format.yaml)),
        ("rake-1.0.0.yml", ("rake-1.0.0", Format.yaml)),
        ("rake-1.0.0.text", ("rake-1.0.0", Format.text)),
        ("rake-1.0.0", ("rake-1.0.0", None)),
        ("json-1.8.6", ("json-1.8.6", None)),
        ("rake-1.0.0.jsonx", ("rake-1.0.0.jsonx", None)),
        (".json", (".json", None)),
    ],
)
def test_split_format_suffix(identifier, expected):
    assert split_format_suffix(identifier) == expected


def test_split_format_suffix_only_strips_allowed():
    assert split_format_suffix("rake.yaml", (Format.json, Format.xml)) == ("rake.yaml", None)
    assert split_format_suffix("rake.xml", (Format.json, Format.xml)) == ("rake", Format.xml)


def test_split_format_suffix_strips_once():
    assert split_format_suffix("rake-1.0.0.json.json") == ("rake-1.0.0.json", Format.json)


def test_xml_conventions():
    root = ET.fromstring(to_xml({"total_downloads": 3, "flag": True, "missing": None, "name": "rake"}))
    assert root.tag == "hash"
    assert root.find("total-downloads").get("type") == "integer"
    assert root.find("flag").text == "true"
    assert root.find("missing").get("nil") == "true"
    assert root.find("name").text == "rake"


def test_xml_nested_lists_use_singular_tags():
    root = ET.fromstring(to_xml({"gems": [[{"number": "1.0"}, 2]]}))
    pair = root.find("gems").find("gem")
    assert pair.get("type") == "array"
    assert [c.tag for c in pair] == ["gem", "gem"]


def test_xml_top_level_list_root():
    assert ET.fromstring(to_xml([1, 2])).tag == "objects"
    assert ET.fromstring(to_xml([], root="versions")).tag == "versions"


def test_yaml_symbolizes_top_level_keys_only():
    text = to_yaml({"gems": [{"number": "1.0"}]})
    assert text.startswith("---")
    assert ":gems:" in text
    assert yaml.safe_load(text) == {":gems": [{"number": "1.0"}]}


def test_render_text_scalar():
    resp = render(42, Format.text)
    assert resp.body == b"42"
    assert resp.media_type.startswith("text/plain")


def test_render_text_record_falls_back_to_json():
    resp = render({"a": 1}, Format.text)
    assert resp.media_type == "application/json"
    assert resp.body == b'{"a":1}'


def test_xml_drops_control_characters_from_text():
    body = to_xml({"summary": "bad\x01summary\x1f", "description": "tab\tand\nnewline"})
    root = ET.fromstring(body)
    assert root.find("summary").text == "badsummary"
    assert root.find("description").text == "tab\tand\nnewline"
