"""
Tilesets - collections of tile graphics addressed by global tile ids.

=============================================================================
EMBEDDED vs EXTERNAL TILESETS
=============================================================================

EMBEDDED: Tileset data is inside the TMX file

    <tileset firstgid="1" name="terrain" tilewidth="32" tileheight="32">
        <image source="terrain.png"/>
    </tileset>

EXTERNAL (TSX): The TMX only holds a reference

    <tileset firstgid="1" source="terrain.tsx"/>

    and terrain.tsx, next to the map, holds the definition (without a
    firstgid - that number belongs to the map using the tileset):

    <?xml version="1.0" encoding="UTF-8"?>
    <tileset name="terrain" tilewidth="32" tileheight="32">
        <image source="terrain.png"/>
    </tileset>

The format has no flag telling the two apart. Tileset.from_xml tries the
embedded schema first and, if the attributes do not fit, reads the same
attributes again as a reference. Only the reference attempt's error is
reported when both fail. Callers always get a fully resolved Tileset.

=============================================================================
GLOBAL TILE IDs (GIDs)
=============================================================================

    Tileset A (firstgid=1):   tiles 1-100
    Tileset B (firstgid=101): tiles 101-200

    Local tile ID within tileset = GID - tileset.first_gid

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Optional, TextIO, Union

from .attributes import Attributes, get_attrs, u32
from .errors import Other, TiledError
from .image import Image
from .properties import Properties, parse_properties
from .reader import EventReader, parse_tag
from .tile import Tile

logger = logging.getLogger(__name__)

_EMBEDDED_ERROR = ("tileset must have a firstgid, name, tile width and height "
                   "with correct types")
_REFERENCE_ERROR = ("tileset must either be embedded (firstgid, name, tilewidth, "
                    "tileheight) or reference a file (firstgid, source)")
_EXTERNAL_ERROR = "tileset must have a name, tile width and height with correct types"

# Attributes shared by embedded and external definitions
_OPTIONAL_ATTRS = [('spacing', u32),
                   ('margin', u32),
                   ('tilecount', u32),
                   ('columns', u32)]
_SIZE_ATTRS = [('name', str),
               ('tilewidth', u32),
               ('tileheight', u32)]


@dataclass
class Tileset:
    """
    Tileset collection - a set of tile graphics.

    SPACING AND MARGIN

    For spritesheets with gaps between tiles:

    margin = pixels around the EDGE of the entire image
    spacing = pixels BETWEEN tiles

    +--+===+===+===+--+
    |  | 0 | 1 | 2 |  |  <- margin
    +--+===+===+===+--+
    |  | 3 | 4 | 5 |  |
    +--+===+===+===+--+
         ^
         spacing between tiles

    A tileset may list several images; usually there is exactly one.
    """
    first_gid: int                                   # First Global ID
    name: str                                        # Tileset name
    tile_width: int                                  # Tile width in pixels
    tile_height: int                                 # Tile height in pixels
    spacing: int = 0                                 # Pixels between tiles
    margin: int = 0                                  # Pixels around edge
    tile_count: Optional[int] = None                 # Total number of tiles
    columns: Optional[int] = None                    # Tiles per row
    images: List[Image] = field(default_factory=list)
    tiles: List[Tile] = field(default_factory=list)  # Tiles with metadata
    properties: Properties = field(default_factory=dict)
    source: Optional[str] = None                     # TSX file (if external)

    # -------------------------------------------------------------------------
    # RESOLUTION
    # -------------------------------------------------------------------------

    @classmethod
    def from_xml(cls, reader: EventReader, attrs: Attributes,
                 map_path: Optional[Union[str, Path]] = None) -> 'Tileset':
        """
        Decode a <tileset> found in a map.

        Parameters:
        -----------
        reader : EventReader
            The map's reader, positioned just after <tileset ...>
        attrs : list of (name, value)
            Attributes of the <tileset> tag
        map_path : str or Path, optional
            Location of the map file; needed only for external tilesets
        """
        try:
            return cls.from_embedded(reader, attrs)
        except TiledError as e:
            logger.debug("tileset is not embedded (%s), trying a reference", e)
        return cls.from_reference(attrs, map_path)

    @classmethod
    def from_embedded(cls, reader: EventReader, attrs: Attributes) -> 'Tileset':
        """Decode a tileset defined inline in the map."""
        optionals, (first_gid, name, width, height) = get_attrs(
            attrs,
            optionals=_OPTIONAL_ATTRS,
            required=[('firstgid', u32)] + _SIZE_ATTRS,
            error=_EMBEDDED_ERROR,
        )
        return cls._parse_body(reader, first_gid, name, width, height, *optionals)

    @classmethod
    def from_reference(cls, attrs: Attributes,
                       map_path: Optional[Union[str, Path]]) -> 'Tileset':
        """
        Decode <tileset firstgid="..." source="..."/> by loading the TSX file.

        The source is resolved relative to the directory holding the map.
        """
        _, (first_gid, source) = get_attrs(
            attrs,
            required=[('firstgid', u32), ('source', str)],
            error=_REFERENCE_ERROR,
        )
        if map_path is None:
            raise Other("Maps with external tilesets must know their file location. "
                        "Use parse_with_path() or parse_file().")

        tileset_path = Path(map_path).parent / source
        try:
            stream = open(tileset_path, 'rb')
        except OSError:
            raise Other(f"External tileset file not found: {tileset_path}")

        logger.info("loading external tileset %s (firstgid=%d)", tileset_path, first_gid)
        with stream:
            tileset = cls.from_external(stream, first_gid)
        tileset.source = source
        return tileset

    @classmethod
    def from_external(cls, stream: Union[BinaryIO, TextIO, bytes, str],
                      first_gid: int) -> 'Tileset':
        """
        Decode a TSX document.

        Parameters:
        -----------
        stream : file-like, bytes or str
            The TSX document
        first_gid : int
            First Global ID, taken from the map referencing the tileset

        Anything before the <tileset> element (XML declaration, doctype) is
        passed over.
        """
        reader = EventReader(stream)
        event = reader.seek_start(
            'tileset', "Tileset document ended before a tileset was found")

        optionals, (name, width, height) = get_attrs(
            event.attributes,
            optionals=_OPTIONAL_ATTRS,
            required=_SIZE_ATTRS,
            error=_EXTERNAL_ERROR,
        )
        return cls._parse_body(reader, first_gid, name, width, height, *optionals)

    # -------------------------------------------------------------------------
    # CHILDREN
    # -------------------------------------------------------------------------

    @classmethod
    def _parse_body(cls, reader: EventReader, first_gid: int, name: str,
                    width: int, height: int, spacing: Optional[int],
                    margin: Optional[int], tile_count: Optional[int],
                    columns: Optional[int]) -> 'Tileset':
        tileset = cls(
            first_gid=first_gid,
            name=name,
            tile_width=width,
            tile_height=height,
            spacing=spacing or 0,
            margin=margin or 0,
            tile_count=tile_count,
            columns=columns,
        )

        parse_tag(reader, 'tileset', {
            'image': lambda a: tileset.images.append(Image.from_xml(reader, a)),
            'tile': lambda a: tileset.tiles.append(Tile.from_xml(reader, a)),
            'properties': lambda _a: tileset.properties.update(parse_properties(reader)),
        })
        return tileset
