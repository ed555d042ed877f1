"""
TMX Parser - reads Tiled maps (TMX) and tilesets (TSX)

Requirements:
    pip install numpy pillow
"""

from .colour import Colour
from .errors import (
    TiledError, MalformedAttributes, PrematureEnd, XmlDecodingError, Other
)
from .image import Image
from .layer import ImageLayer, TileLayer
from .map import (
    Orientation, TiledMap, parse, parse_file, parse_tileset, parse_with_path
)
from .objects import Ellipse, MapObject, ObjectGroup, Polygon, Polyline, Rect
from .properties import Property, parse_properties
from .tile import Frame, Tile
from .tileset import Tileset

__version__ = "1.0.0"
__all__ = [
    "parse",
    "parse_file",
    "parse_with_path",
    "parse_tileset",
    "parse_properties",
    "TiledMap",
    "Orientation",
    "Tileset",
    "Tile",
    "Frame",
    "Image",
    "TileLayer",
    "ImageLayer",
    "ObjectGroup",
    "MapObject",
    "Rect",
    "Ellipse",
    "Polyline",
    "Polygon",
    "Property",
    "Colour",
    "TiledError",
    "MalformedAttributes",
    "PrematureEnd",
    "XmlDecodingError",
    "Other",
]
