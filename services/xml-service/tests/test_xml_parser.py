"""Tests for xml_parser -- vendor XML to dict/list/str conversion."""

import pytest
from lxml import etree

from xml_parser import XmlParseError, as_list, parse, parse_node, xml_to_array


# ---------------------------------------------------------------------------
# Shape rules
# ---------------------------------------------------------------------------

def test_leaf_root_collapses_to_string():
    assert parse("<root>hello</root>") == "hello"


def test_empty_root_collapses_to_empty_string():
    assert parse("<root/>") == ""


@pytest.mark.parametrize("xml_text", ["", "   ", "\n\t\n", b"", None])
def test_empty_input_returns_empty_mapping(xml_text):
    assert parse(xml_text) == {}


def test_root_with_attributes_keeps_only_attributes():
    # Top-level path: attributes present, no children -> no _value
    assert parse('<root id="5">text</root>') == {"@id": "5"}


def test_child_with_attributes_keeps_value():
    assert parse('<wrap><root id="5">text</root></wrap>') == {
        "root": {"@id": "5", "_value": "text"}
    }


def test_xml_to_array_and_parse_node_differ_for_attributed_leaf():
    element = etree.fromstring('<root id="5">text</root>')
    assert xml_to_array(element) == {"@id": "5"}
    assert parse_node(element) == {"@id": "5", "_value": "text"}


def test_parse_node_plain_leaf_is_text():
    assert parse_node(etree.fromstring("<zip>20001</zip>")) == "20001"


@pytest.mark.parametrize("count", [2, 3, 5])
def test_repeated_siblings_become_list(count):
    items = "".join(f"<item>{i}</item>" for i in range(count))
    result = parse(f"<root>{items}</root>")
    assert result == {"item": [str(i) for i in range(count)]}


def test_single_sibling_stays_bare():
    assert parse("<root><item>a</item></root>") == {"item": "a"}


def test_repeated_structured_siblings_become_list():
    result = parse("<r><i><a>1</a></i><i><a>2</a></i></r>")
    assert result == {"i": [{"a": "1"}, {"a": "2"}]}


def test_repeated_attributed_leaves():
    result = parse('<r><slot id="1"/><slot id="2"/></r>')
    assert result == {"slot": [{"@id": "1", "_value": ""}, {"@id": "2", "_value": ""}]}


def test_root_attributes_and_children_share_namespace():
    result = parse('<response version="2"><status>ok</status></response>')
    assert result == {"@version": "2", "status": "ok"}


def test_nested_response():
    xml_text = (
        "<response><validation><valid>Y</valid>"
        "<customer><name>Jane Doe</name><address>1 Main St</address></customer>"
        "</validation></response>"
    )
    assert parse(xml_text) == {
        "validation": {
            "valid": "Y",
            "customer": {"name": "Jane Doe", "address": "1 Main St"},
        }
    }


def test_comments_are_not_children():
    assert parse("<r><!-- note --><a>1</a></r>") == {"a": "1"}


def test_namespaces_are_dropped():
    assert parse('<r xmlns:x="urn:x"><x:a>1</x:a></r>') == {"a": "1"}


def test_cdata_is_merged_into_text():
    assert parse("<r><a><![CDATA[<b>&]]></a></r>") == {"a": "<b>&"}


def test_bytes_with_declaration():
    xml_bytes = '<?xml version="1.0" encoding="UTF-8"?><r><name>José</name></r>'.encode("utf-8")
    assert parse(xml_bytes) == {"name": "José"}


def test_text_with_declaration():
    assert parse('<?xml version="1.0" encoding="UTF-8"?>\n<r><a>1</a></r>') == {"a": "1"}


def test_text_ignores_declared_encoding():
    xml_text = '<?xml version="1.0" encoding="ISO-8859-1"?><r><n>José</n></r>'
    assert parse(xml_text) == {"n": "José"}


def test_bytes_honour_declared_encoding():
    xml_bytes = '<?xml version="1.0" encoding="ISO-8859-1"?><r><n>José</n></r>'.encode("iso-8859-1")
    assert parse(xml_bytes) == {"n": "José"}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_malformed_xml_raises_with_first_diagnostic():
    with pytest.raises(XmlParseError) as exc_info:
        parse("<root><a></root>")
    message = str(exc_info.value)
    assert message.startswith("XML Parse Error: ")
    assert len(message) > len("XML Parse Error: ")


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse("not xml at all")


def test_parse_after_failure_is_clean():
    with pytest.raises(XmlParseError):
        parse("<broken>")
    assert parse("<r><a>1</a></r>") == {"a": "1"}


# ---------------------------------------------------------------------------
# XXE
# ---------------------------------------------------------------------------

def test_external_file_entity_is_not_resolved(tmp_path):
    secret = tmp_path / "secret.txt"
    secret.write_text("TOP-SECRET-CONTENT")
    xml_text = (
        f'<!DOCTYPE r [<!ENTITY xxe SYSTEM "file://{secret}">]>'
        "<r><v>&xxe;</v></r>"
    )
    try:
        result = parse(xml_text)
    except XmlParseError:
        return
    assert "TOP-SECRET-CONTENT" not in repr(result)


def test_network_entity_is_not_fetched():
    xml_text = (
        '<!DOCTYPE r [<!ENTITY remote SYSTEM "http://127.0.0.1:9/evil.xml">]>'
        "<r><v>&remote;</v></r>"
    )
    try:
        result = parse(xml_text)
    except XmlParseError:
        return
    assert result == {"v": ""}


def test_entity_expansion_is_not_performed():
    xml_text = (
        '<!DOCTYPE r [<!ENTITY a "aaaaaaaaaa"><!ENTITY b "&a;&a;&a;&a;&a;">]>'
        "<r><v>&b;</v></r>"
    )
    try:
        result = parse(xml_text)
    except XmlParseError:
        return
    assert "aaaaaaaaaa" not in repr(result)


# ---------------------------------------------------------------------------
# as_list
# ---------------------------------------------------------------------------

def test_as_list():
    assert as_list(None) == []
    assert as_list("a") == ["a"]
    assert as_list({"date": "2024-05-01"}) == [{"date": "2024-05-01"}]
    values = ["a", "b"]
    assert as_list(values) is values
