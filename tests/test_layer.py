"""Tests for tile data decoding, tile layers and image layers."""

import base64
import gzip
import struct
import zlib

import numpy as np
import pytest

from tmx_parser.errors import MalformedAttributes, Other
from tmx_parser.layer import (
    FLIPPED_HORIZONTALLY, FLIPPED_VERTICALLY, ImageLayer, TileLayer
)

from conftest import open_element

GIDS = [1, 2, 3, 4, 5, FLIPPED_HORIZONTALLY | 6]
EXPECTED = np.array(GIDS, dtype=np.uint32).reshape(2, 3)


def encode(compress=None) -> str:
    raw = struct.pack("<6I", *GIDS)
    if compress:
        raw = compress(raw)
    return base64.b64encode(raw).decode("ascii")


def parse_layer(data: str, extra: str = "") -> TileLayer:
    reader, attrs = open_element(f'<layer name="Ground" {extra}>{data}</layer>')
    return TileLayer.from_xml(reader, attrs, map_width=3, map_height=2)


@pytest.mark.parametrize("data", [
    f'<data encoding="csv">\n1,2,3,\n4,5,{FLIPPED_HORIZONTALLY | 6}\n</data>',
    f'<data encoding="base64">\n   {encode()}\n  </data>',
    f'<data encoding="base64" compression="zlib">{encode(zlib.compress)}</data>',
    f'<data encoding="base64" compression="gzip">{encode(gzip.compress)}</data>',
    '<data>' + "".join(f'<tile gid="{gid}"/>' for gid in GIDS) + '</data>',
])
def test_tile_data_encodings(data):
    layer = parse_layer(data)

    assert layer.tiles.shape == (2, 3)
    assert layer.tiles.dtype == np.uint32
    np.testing.assert_array_equal(layer.tiles, EXPECTED)


def test_xml_tiles_without_gid_are_empty():
    layer = parse_layer('<data><tile/><tile gid="2"/><tile/><tile/><tile/><tile/></data>')

    assert layer.tiles[0].tolist() == [0, 2, 0]


def test_gids_and_flip_flags():
    layer = parse_layer(f'<data encoding="csv">1,2,3,4,5,{FLIPPED_VERTICALLY | FLIPPED_HORIZONTALLY | 6}</data>')

    assert layer.gids[1].tolist() == [4, 5, 6]
    assert layer.gid_at(2, 1) == 6
    assert layer.gid_at(3, 0) == 0
    assert layer.flip_flags(2, 1) == (True, True, False)
    assert layer.flip_flags(0, 0) == (False, False, False)


def test_layer_attributes_and_properties():
    layer = parse_layer(
        '<properties><property name="z" type="int" value="2"/></properties>'
        '<data encoding="csv">0,0,0,0,0,0</data>',
        extra='opacity="0.25" visible="0" offsetx="4" offsety="-8"',
    )

    assert layer.name == "Ground"
    assert (layer.width, layer.height) == (3, 2)
    assert layer.opacity == 0.25
    assert layer.visible is False
    assert (layer.offset_x, layer.offset_y) == (4.0, -8.0)
    assert layer.properties["z"].value == 2


def test_layer_without_data_is_empty():
    layer = parse_layer("")

    assert layer.tiles.shape == (2, 3)
    assert not layer.tiles.any()


def test_tile_count_mismatch():
    with pytest.raises(MalformedAttributes, match="needs 6 tiles, data has 4"):
        parse_layer('<data encoding="csv">1,2,3,4</data>')


@pytest.mark.parametrize("data, error", [
    ('<data encoding="csv">1,x,3,4,5,6</data>', MalformedAttributes),
    ('<data encoding="csv">1,-2,3,4,5,6</data>', MalformedAttributes),
    ('<data encoding="base64">AAAA!</data>', MalformedAttributes),
    ('<data encoding="base64" compression="zlib">AAAAAAAAAAA=</data>', MalformedAttributes),
    (f'<data encoding="base64" compression="zstd">{encode()}</data>', Other),
    ('<data encoding="hex">00</data>', Other),
])
def test_invalid_tile_data(data, error):
    with pytest.raises(error):
        parse_layer(data)


def test_image_layer():
    xml = '''<imagelayer name="Sky" opacity="0.5" offsetx="10">
        <image source="sky.png" width="640" height="480"/>
        <properties><property name="parallax" type="float" value="0.2"/></properties>
    </imagelayer>'''
    reader, attrs = open_element(xml)

    layer = ImageLayer.from_xml(reader, attrs)

    assert layer.name == "Sky"
    assert layer.opacity == 0.5
    assert layer.offset_x == 10.0
    assert layer.image.source == "sky.png"
    assert layer.properties["parallax"].value == 0.2
