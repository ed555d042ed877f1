"""
Tile layers and image layers.

=============================================================================
DATA ENCODINGS
=============================================================================

TMX supports multiple encodings for tile data:

1. XML (deprecated):
   <data>
       <tile gid="1"/><tile gid="2"/><tile gid="3"/>...
   </data>

2. CSV:
   <data encoding="csv">
       1,2,3,4,5,
       6,7,8,9,10
   </data>

3. Base64 (optionally zlib or gzip compressed):
   <data encoding="base64" compression="zlib">
       eJxjZGBgYGJgYGBhYGBlYGBjYGBnYGBgAAAJYAEV
   </data>
   Little-endian uint32 per tile.

Tiles are stored in a numpy uint32 array of shape (height, width):

    layer.tiles[y, x]  -> raw GID including flip flags
    layer.gids[y, x]   -> GID with flip flags cleared

=============================================================================
FLIP FLAGS
=============================================================================

The highest bits of each GID are flags:

    bit 31: flipped horizontally
    bit 30: flipped vertically
    bit 29: flipped diagonally (anti-diagonal transpose)
    bit 28: rotated 120 degrees (hexagonal maps)

=============================================================================
"""

import base64
import gzip
import zlib
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from .attributes import Attributes, get_attrs, number, u32, visibility
from .errors import MalformedAttributes, Other
from .image import Image
from .properties import Properties, parse_properties
from .reader import EventReader, parse_tag

FLIPPED_HORIZONTALLY = 0x80000000
FLIPPED_VERTICALLY = 0x40000000
FLIPPED_DIAGONALLY = 0x20000000
ROTATED_HEXAGONAL_120 = 0x10000000
GID_MASK = 0x0FFFFFFF


def _decompress(raw: bytes, compression: Optional[str]) -> bytes:
    if compression is None:
        return raw
    try:
        if compression == 'zlib':
            return zlib.decompress(raw)
        if compression == 'gzip':
            return gzip.decompress(raw)
    except (zlib.error, OSError, EOFError) as e:
        raise MalformedAttributes(f"tile data could not be decompressed: {e}")
    raise Other(f"unsupported tile data compression: {compression!r}")


def decode_data(reader: EventReader, attrs: Attributes,
                width: int, height: int) -> np.ndarray:
    """
    Decode a <data> element into a (height, width) uint32 array.

    The reader must be positioned just after <data ...>; on return it is
    positioned just after </data>.
    """
    (encoding, compression), _ = get_attrs(
        attrs,
        optionals=[('encoding', str), ('compression', str)],
    )

    if encoding is None:
        # -----------------------------------------------------------------
        # XML FORMAT (deprecated): one <tile gid="..."/> per cell
        # -----------------------------------------------------------------
        gids = []

        def tile_handler(tile_attrs: Attributes):
            (gid,), _ = get_attrs(tile_attrs, optionals=[('gid', u32)])
            gids.append(gid or 0)

        parse_tag(reader, 'data', {'tile': tile_handler})
        tiles = np.array(gids, dtype=np.uint32)

    elif encoding == 'csv':
        # -----------------------------------------------------------------
        # CSV FORMAT: "1,2,3,4,\n5,6,7,8,\n..."
        # -----------------------------------------------------------------
        text = reader.read_text('data')
        try:
            # Trailing commas create empty elements
            tiles = np.array([u32(v.strip()) for v in text.split(',') if v.strip()],
                             dtype=np.uint32)
        except ValueError:
            raise MalformedAttributes("csv tile data must be unsigned integers")

    elif encoding == 'base64':
        # -----------------------------------------------------------------
        # BASE64 FORMAT, possibly compressed
        # -----------------------------------------------------------------
        text = reader.read_text('data')
        try:
            raw = base64.b64decode(text.strip())
        except ValueError:
            raise MalformedAttributes("tile data is not valid base64")
        raw = _decompress(raw, compression)
        if len(raw) % 4:
            raise MalformedAttributes("base64 tile data is not a whole number of tiles")
        tiles = np.frombuffer(raw, dtype='<u4').astype(np.uint32)

    else:
        raise Other(f"unsupported tile data encoding: {encoding!r}")

    if tiles.size != width * height:
        raise MalformedAttributes(
            f"layer of {width}x{height} needs {width * height} tiles, "
            f"data has {tiles.size}")
    return tiles.reshape(height, width)


# =============================================================================
# TILE LAYER
# =============================================================================

@dataclass(eq=False)
class TileLayer:
    """
    Tile layer - a grid of tile references.

    GID 0 = empty (no tile)
    GID > 0 = reference to a tileset tile (flip flags may be set)
    """
    name: str                                        # Layer name
    width: int                                       # Width in tiles
    height: int                                      # Height in tiles
    opacity: float = 1.0                             # Transparency
    visible: bool = True                             # Is layer rendered?
    offset_x: float = 0.0                            # X pixel offset
    offset_y: float = 0.0                            # Y pixel offset
    properties: Properties = field(default_factory=dict)
    tiles: np.ndarray = field(default_factory=lambda: np.zeros((0, 0), dtype=np.uint32))

    @classmethod
    def from_xml(cls, reader: EventReader, attrs: Attributes,
                 map_width: int, map_height: int) -> 'TileLayer':
        """Parse a <layer>; width/height default to the map size."""
        (name, width, height, opacity, visible, offset_x, offset_y), _ = get_attrs(
            attrs,
            optionals=[('name', str),
                       ('width', u32),
                       ('height', u32),
                       ('opacity', number),
                       ('visible', visibility),
                       ('offsetx', number),
                       ('offsety', number)],
        )
        layer = cls(
            name=name or "",
            width=width if width is not None else map_width,
            height=height if height is not None else map_height,
            opacity=opacity if opacity is not None else 1.0,
            visible=visible if visible is not None else True,
            offset_x=offset_x or 0.0,
            offset_y=offset_y or 0.0,
        )
        layer.tiles = np.zeros((layer.height, layer.width), dtype=np.uint32)

        def data_handler(data_attrs: Attributes):
            layer.tiles = decode_data(reader, data_attrs, layer.width, layer.height)

        parse_tag(reader, 'layer', {
            'data': data_handler,
            'properties': lambda _a: layer.properties.update(parse_properties(reader)),
        })
        return layer

    @property
    def gids(self) -> np.ndarray:
        """Tile GIDs with the flip flags cleared."""
        return self.tiles & np.uint32(GID_MASK)

    def gid_at(self, x: int, y: int) -> int:
        """GID at column x, row y (0 when out of bounds)."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return int(self.tiles[y, x]) & GID_MASK
        return 0

    def flip_flags(self, x: int, y: int) -> Tuple[bool, bool, bool]:
        """(horizontal, vertical, diagonal) flip flags of the tile at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False, False, False
        raw = int(self.tiles[y, x])
        return (bool(raw & FLIPPED_HORIZONTALLY),
                bool(raw & FLIPPED_VERTICALLY),
                bool(raw & FLIPPED_DIAGONALLY))


# =============================================================================
# IMAGE LAYER
# =============================================================================

@dataclass
class ImageLayer:
    """Layer showing a single image (backgrounds, overlays)."""
    name: str = ""
    opacity: float = 1.0
    visible: bool = True
    offset_x: float = 0.0
    offset_y: float = 0.0
    image: Optional[Image] = None
    properties: Properties = field(default_factory=dict)

    @classmethod
    def from_xml(cls, reader: EventReader, attrs: Attributes) -> 'ImageLayer':
        (name, opacity, visible, offset_x, offset_y), _ = get_attrs(
            attrs,
            optionals=[('name', str),
                       ('opacity', number),
                       ('visible', visibility),
                       ('offsetx', number),
                       ('offsety', number)],
        )
        layer = cls(
            name=name or "",
            opacity=opacity if opacity is not None else 1.0,
            visible=visible if visible is not None else True,
            offset_x=offset_x or 0.0,
            offset_y=offset_y or 0.0,
        )

        def image_handler(image_attrs: Attributes):
            layer.image = Image.from_xml(reader, image_attrs)

        parse_tag(reader, 'imagelayer', {
            'image': image_handler,
            'properties': lambda _a: layer.properties.update(parse_properties(reader)),
        })
        return layer
