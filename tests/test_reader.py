"""Tests for the event reader and the tag dispatcher."""

import io

import pytest

from tmx_parser.errors import PrematureEnd, XmlDecodingError
from tmx_parser.reader import END, END_DOCUMENT, START, EventReader, parse_tag

from conftest import open_element


def test_events_strip_namespaces_and_keep_attribute_order():
    reader = EventReader(b'<m:map xmlns:m="urn:test" b="2" a="1"><child/></m:map>')

    event = reader.next()
    assert (event.kind, event.name) == (START, "map")
    assert event.attributes == [("b", "2"), ("a", "1")]
    assert reader.depth == 1

    assert reader.next().name == "child"
    assert reader.next().kind == END
    assert reader.next().kind == END
    assert reader.depth == 0
    assert reader.next().kind == END_DOCUMENT


def test_reads_file_like_streams_in_chunks():
    body = "".join(f'<item n="{i}"/>' for i in range(2000))
    stream = io.BytesIO(f"<root>{body}</root>".encode())
    reader = EventReader(stream)
    reader.CHUNK_SIZE = 64
    reader.next()

    seen = []
    parse_tag(reader, "root", {"item": lambda a: seen.append(int(dict(a)["n"]))})

    assert seen == list(range(2000))


def test_handlers_receive_attributes_of_matching_children():
    reader, _ = open_element('<group><a v="1"/><b v="2"/><a v="3"/></group>')
    seen = []

    parse_tag(reader, "group", {"a": lambda attrs: seen.append(dict(attrs)["v"])})

    assert seen == ["1", "3"]
    assert reader.next().kind == END_DOCUMENT


def test_unknown_subtrees_are_skipped_without_desynchronising_siblings():
    xml = '''<group>
        <vendor><a v="hidden"/><group><a v="deeper"/></group></vendor>
        <a v="visible"/>
    </group>'''
    reader, _ = open_element(xml)
    seen = []

    parse_tag(reader, "group", {"a": lambda attrs: seen.append(dict(attrs)["v"])})

    assert seen == ["visible"]


def test_children_left_unread_by_a_handler_are_skipped():
    reader, _ = open_element('<group><a><inner/><inner/></a><b/></group>')
    seen = []

    parse_tag(reader, "group", {
        "a": lambda attrs: seen.append("a"),
        "b": lambda attrs: seen.append("b"),
    })

    assert seen == ["a", "b"]


def test_handler_errors_propagate():
    reader, _ = open_element('<group><a/></group>')

    def fail(_attrs):
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        parse_tag(reader, "group", {"a": fail})


def test_truncated_document_is_a_premature_end_naming_the_tag():
    reader, _ = open_element('<group><a/>')

    with pytest.raises(PrematureEnd, match="<group>"):
        parse_tag(reader, "group")


def test_truncated_inside_skipped_child_names_the_child():
    reader, _ = open_element('<group><vendor><x>')

    with pytest.raises(PrematureEnd, match="<vendor>"):
        parse_tag(reader, "group")


def test_malformed_xml_is_a_decoding_error():
    reader = EventReader('<group><a></b></group>')

    with pytest.raises(XmlDecodingError) as excinfo:
        while reader.next().kind != END_DOCUMENT:
            pass
    assert excinfo.value.error is not None


def test_empty_document_is_a_decoding_error():
    with pytest.raises(XmlDecodingError):
        EventReader(b"").next()


def test_seek_start_skips_preceding_content():
    reader = EventReader('<?xml version="1.0"?><!-- c --><outer><target k="v"/></outer>')

    event = reader.seek_start("target", "no target")

    assert event.attributes == [("k", "v")]


def test_seek_start_reports_premature_end():
    with pytest.raises(PrematureEnd, match="no target"):
        EventReader("<outer/>").seek_start("target", "no target")


def test_read_text_consumes_element():
    reader, _ = open_element('<p>line one\nline two<!-- x --></p>')

    assert reader.read_text("p") == "line one\nline two"
    assert reader.next().kind == END_DOCUMENT


def test_decoding_error_follows_the_events_before_it():
    reader, _ = open_element('<group><a v="1"/><b></group>')
    seen = []

    with pytest.raises(XmlDecodingError) as excinfo:
        parse_tag(reader, "group", {"a": lambda attrs: seen.append(dict(attrs)["v"])})

    assert seen == ["1"]
    assert excinfo.value.__cause__ is excinfo.value.error


def test_decoding_error_is_raised_again_on_later_reads():
    reader = EventReader('<group><a></b></group>')
    reader.next()
    reader.next()

    for _ in range(2):
        with pytest.raises(XmlDecodingError):
            reader.next()


def test_finished_children_are_detached_from_their_parent():
    body = "".join(f'<item n="{i}"/>' for i in range(5000))
    reader = EventReader(io.BytesIO(f"<wrap>{body}</wrap>".encode()))
    reader.CHUNK_SIZE = 64
    reader.next()
    wrap = reader._elements[0]
    resident = []

    parse_tag(reader, "wrap", {"item": lambda a: resident.append(len(wrap))})

    assert len(resident) == 5000
    assert max(resident) < 100
