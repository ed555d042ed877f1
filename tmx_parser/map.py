"""
Map documents - the entry point for TMX files.

=============================================================================
TMX FILE STRUCTURE
=============================================================================

    <map version="1.10" orientation="orthogonal" width="100" height="100"
         tilewidth="32" tileheight="32">

        <tileset firstgid="1" name="terrain" tilewidth="32" tileheight="32">
            <image source="terrain.png" width="256" height="256"/>
        </tileset>
        <tileset firstgid="65" source="props.tsx"/>

        <layer name="Ground" width="100" height="100">
            <data encoding="csv">
                1,2,3,4,5,...
            </data>
        </layer>

        <objectgroup name="Collisions">
            <object id="1" x="100" y="200" width="32" height="32"/>
        </objectgroup>
    </map>

=============================================================================
USAGE
=============================================================================

    tiled_map = parse_file("level1.tmx")

    with open("level1.tmx", "rb") as f:
        tiled_map = parse_with_path(f, "level1.tmx")

    # Without a path, maps using external tilesets cannot be loaded
    tiled_map = parse(io.BytesIO(data))

The whole document is read eagerly; the result holds no reference to the
file.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO, List, Optional, TextIO, Union

from .attributes import Attributes, get_attrs, u32
from .colour import Colour
from .layer import ImageLayer, TileLayer
from .objects import ObjectGroup
from .properties import Properties, parse_properties
from .reader import EventReader, parse_tag
from .tileset import Tileset

Source = Union[BinaryIO, TextIO, bytes, str]


class Orientation(Enum):
    ORTHOGONAL = 'orthogonal'
    ISOMETRIC = 'isometric'
    STAGGERED = 'staggered'
    HEXAGONAL = 'hexagonal'


@dataclass
class TiledMap:
    """
    Complete Tiled map - the root object for TMX files.

    Layers are kept by kind, each list in document order.
    """
    version: str                                     # TMX format version
    orientation: Orientation                         # Map orientation
    width: int                                       # Map width in tiles
    height: int                                      # Map height in tiles
    tile_width: int                                  # Tile width in pixels
    tile_height: int                                 # Tile height in pixels
    render_order: str = "right-down"                 # Render order
    background_colour: Optional[Colour] = None
    tilesets: List[Tileset] = field(default_factory=list)
    layers: List[TileLayer] = field(default_factory=list)
    image_layers: List[ImageLayer] = field(default_factory=list)
    object_groups: List[ObjectGroup] = field(default_factory=list)
    properties: Properties = field(default_factory=dict)

    @classmethod
    def from_xml(cls, reader: EventReader, attrs: Attributes,
                 map_path: Optional[Union[str, Path]] = None) -> 'TiledMap':
        """Parse a <map> element; reader ends past </map>."""
        (background, render_order), (version, orientation, width, height,
                                     tile_width, tile_height) = get_attrs(
            attrs,
            optionals=[('backgroundcolor', Colour.parse),
                       ('renderorder', str)],
            required=[('version', str),
                      ('orientation', Orientation),
                      ('width', u32),
                      ('height', u32),
                      ('tilewidth', u32),
                      ('tileheight', u32)],
            error="map must have a version, a known orientation, width, height "
                  "and tile size",
        )
        tiled_map = cls(
            version=version,
            orientation=orientation,
            width=width,
            height=height,
            tile_width=tile_width,
            tile_height=tile_height,
            render_order=render_order or "right-down",
            background_colour=background,
        )

        def layer_handler(a: Attributes):
            tiled_map.layers.append(TileLayer.from_xml(reader, a, width, height))

        parse_tag(reader, 'map', {
            'tileset': lambda a: tiled_map.tilesets.append(
                Tileset.from_xml(reader, a, map_path)),
            'layer': layer_handler,
            'imagelayer': lambda a: tiled_map.image_layers.append(
                ImageLayer.from_xml(reader, a)),
            'objectgroup': lambda a: tiled_map.object_groups.append(
                ObjectGroup.from_xml(reader, a)),
            'properties': lambda _a: tiled_map.properties.update(
                parse_properties(reader)),
        })
        return tiled_map


# =============================================================================
# ENTRY POINTS
# =============================================================================

def parse_with_path(source: Source,
                    map_path: Optional[Union[str, Path]]) -> TiledMap:
    """
    Parse a TMX document.

    Parameters:
    -----------
    source : file-like, bytes or str
        The TMX document
    map_path : str or Path, optional
        Where the document lives; external tilesets are resolved next to it

    Raises:
    -------
    TiledError : on any malformed or incomplete document
    """
    reader = EventReader(source)
    event = reader.seek_start('map', "Document ended before map was parsed")
    return TiledMap.from_xml(reader, event.attributes, map_path)


def parse(source: Source) -> TiledMap:
    """Parse a TMX document that does not use external tilesets."""
    return parse_with_path(source, None)


def parse_file(path: Union[str, Path]) -> TiledMap:
    """Open and parse a TMX file from disk."""
    with open(path, 'rb') as f:
        return parse_with_path(f, path)


def parse_tileset(source: Source, first_gid: int) -> Tileset:
    """Parse a standalone TSX document, assigning it `first_gid`."""
    return Tileset.from_external(source, first_gid)
