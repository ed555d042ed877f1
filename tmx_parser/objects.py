"""
Object layers and the objects they contain.

=============================================================================
OBJECT SHAPES
=============================================================================

An <object> is a positioned annotation. Its geometry is given by at most
one shape child:

    <object x="10" y="20" width="32" height="16"/>          -> Rect
    <object x="10" y="20" width="32" height="16">
        <ellipse/>                                          -> Ellipse
    </object>
    <object x="10" y="20">
        <polyline points="0,0 10,0 10,10"/>                 -> Polyline
    </object>
    <object x="10" y="20">
        <polygon points="0,0 10,0 10,10"/>                  -> Polygon
    </object>

Rect and Ellipse take their size from the object's own width/height.
Polyline/polygon points are relative to the object's position and keep the
order in which they were written - the order defines the path.

Without a shape child the object is a Rect. If several shape children are
present, the last one wins.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .attributes import Attributes, get_attrs, number, u32, visibility
from .colour import Colour
from .errors import MalformedAttributes
from .properties import Properties, parse_properties
from .reader import EventReader, parse_tag

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


# =============================================================================
# SHAPES
# =============================================================================

@dataclass
class Rect:
    width: float
    height: float


@dataclass
class Ellipse:
    width: float
    height: float


@dataclass
class Polyline:
    points: List[Point]


@dataclass
class Polygon:
    points: List[Point]


ObjectShape = Union[Rect, Ellipse, Polyline, Polygon]


def parse_points(text: str) -> List[Point]:
    """
    Parse a points attribute: "x1,y1 x2,y2 ... xn,yn".

    Raises MalformedAttributes if any pair does not have exactly two
    numeric coordinates. Pairs are separated by exactly one space, so a
    doubled space yields an empty pair. No partial list is ever returned.
    """
    if not text:
        raise MalformedAttributes("a points list must contain at least one point")
    pairs = text.split(' ')

    points = []
    for pair in pairs:
        coords = pair.split(',')
        if len(coords) != 2:
            raise MalformedAttributes(
                "one of the points does not have an x and y coordinate")
        try:
            points.append((number(coords[0]), number(coords[1])))
        except ValueError:
            raise MalformedAttributes(
                "one of the points does not have numeric coordinates")
    return points


def _points_attr(attrs: Attributes, kind: str) -> List[Point]:
    _, (text,) = get_attrs(
        attrs,
        required=[('points', str)],
        error=f"a {kind} must have points",
    )
    return parse_points(text)


# =============================================================================
# MAP OBJECT
# =============================================================================

@dataclass
class MapObject:
    """
    Object in an object layer.

    Objects are vector shapes placed on the map, used for:
    - Collision shapes (rectangles, polygons)
    - Spawn points
    - Trigger areas
    - Entity placement (tile objects, gid != 0)
    """
    x: float                                         # X position (required)
    y: float                                         # Y position (required)
    id: int = 0                                      # Unique object ID
    gid: int = 0                                     # Tile GID (0 = not a tile object)
    name: str = ""                                   # Object name
    type: str = ""                                   # Object type/class
    rotation: float = 0                              # Rotation in degrees
    visible: bool = True                             # Is object visible?
    shape: ObjectShape = field(default_factory=lambda: Rect(0.0, 0.0))
    properties: Properties = field(default_factory=dict)

    @classmethod
    def from_xml(cls, reader: EventReader, attrs: Attributes) -> 'MapObject':
        """Parse an <object> and its children; reader ends past </object>."""
        (obj_id, gid, name, obj_type, obj_class, width, height, visible,
         rotation), (x, y) = get_attrs(
            attrs,
            optionals=[('id', u32),
                       ('gid', u32),
                       ('name', str),
                       ('type', str),
                       ('class', str),       # Tiled 1.9+ name for "type"
                       ('width', number),
                       ('height', number),
                       ('visible', visibility),
                       ('rotation', number)],
            required=[('x', number), ('y', number)],
            error="objects must have an x and a y number",
        )
        width = width if width is not None else 0.0
        height = height if height is not None else 0.0

        shape: Optional[ObjectShape] = None
        properties: Properties = {}

        def set_shape(new_shape: ObjectShape):
            nonlocal shape
            if shape is not None:
                logger.warning("object %s declares more than one shape; "
                               "keeping the last (%s)", obj_id,
                               type(new_shape).__name__)
            shape = new_shape

        def properties_handler(_attrs):
            nonlocal properties
            properties = parse_properties(reader)

        parse_tag(reader, 'object', {
            'ellipse': lambda _attrs: set_shape(Ellipse(width, height)),
            'polyline': lambda a: set_shape(Polyline(_points_attr(a, 'polyline'))),
            'polygon': lambda a: set_shape(Polygon(_points_attr(a, 'polygon'))),
            'properties': properties_handler,
        })

        return cls(
            x=x,
            y=y,
            id=obj_id or 0,
            gid=gid or 0,
            name=name or "",
            type=obj_type if obj_type is not None else (obj_class or ""),
            rotation=rotation or 0.0,
            visible=visible if visible is not None else True,
            shape=shape if shape is not None else Rect(width, height),
            properties=properties,
        )


# =============================================================================
# OBJECT GROUP
# =============================================================================

@dataclass
class ObjectGroup:
    """
    Object layer - an ordered container of objects.

    Used for non-tile data (collision shapes, spawn points, triggers) and,
    inside <tile>, for per-tile collision geometry. Objects keep document
    order.
    """
    name: str = ""                                   # Layer name
    opacity: float = 1.0                             # Transparency
    visible: bool = True                             # Is layer visible?
    colour: Optional[Colour] = None                  # Display colour
    objects: List[MapObject] = field(default_factory=list)
    properties: Properties = field(default_factory=dict)

    @classmethod
    def from_xml(cls, reader: EventReader, attrs: Attributes) -> 'ObjectGroup':
        """Parse an <objectgroup> and its objects; reader ends past </objectgroup>."""
        (opacity, visible, colour, name), _ = get_attrs(
            attrs,
            optionals=[('opacity', number),
                       ('visible', visibility),
                       ('color', Colour.parse),
                       ('name', str)],
        )
        objects: List[MapObject] = []
        properties: Properties = {}

        def properties_handler(_attrs):
            properties.update(parse_properties(reader))

        parse_tag(reader, 'objectgroup', {
            'object': lambda a: objects.append(MapObject.from_xml(reader, a)),
            'properties': properties_handler,
        })

        return cls(
            name=name or "",
            opacity=opacity if opacity is not None else 1.0,
            visible=visible if visible is not None else True,
            colour=colour,
            objects=objects,
            properties=properties,
        )
