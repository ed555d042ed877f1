"""
Individual tile metadata within a tileset.

Only tiles with something to say are listed in a tileset: custom
properties, per-tile images (image collection tilesets), collision shapes
or an animation.

    <tile id="5" type="water">
        <properties>...</properties>
        <objectgroup>...</objectgroup>
        <animation>
            <frame tileid="5" duration="100"/>
            <frame tileid="6" duration="100"/>
        </animation>
    </tile>

The 'id' is LOCAL to the tileset: gid = tileset.first_gid + tile.id
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .attributes import Attributes, get_attrs, number, u32
from .image import Image
from .objects import ObjectGroup
from .properties import Properties, parse_properties
from .reader import EventReader, parse_tag


@dataclass
class Frame:
    """One step of a tile animation."""
    tile_id: int                                     # Local id of the tile shown
    duration: int                                    # Milliseconds


@dataclass
class Tile:
    id: int                                          # Local tile ID (within tileset)
    type: str = ""                                   # Tile type/class
    probability: float = 1.0                         # Terrain brush weight
    images: List[Image] = field(default_factory=list)
    properties: Properties = field(default_factory=dict)
    objectgroup: Optional[ObjectGroup] = None        # Collision shapes
    animation: List[Frame] = field(default_factory=list)

    @classmethod
    def from_xml(cls, reader: EventReader, attrs: Attributes) -> 'Tile':
        """Parse tile from its attributes and children."""
        (tile_type, tile_class, probability), (tile_id,) = get_attrs(
            attrs,
            optionals=[('type', str), ('class', str), ('probability', number)],
            required=[('id', u32)],
            error="tile must have an id with the correct type",
        )
        tile = cls(
            id=tile_id,
            type=tile_type if tile_type is not None else (tile_class or ""),
            probability=probability if probability is not None else 1.0,
        )

        def objectgroup_handler(a):
            tile.objectgroup = ObjectGroup.from_xml(reader, a)

        parse_tag(reader, 'tile', {
            'image': lambda a: tile.images.append(Image.from_xml(reader, a)),
            'properties': lambda _a: tile.properties.update(parse_properties(reader)),
            'objectgroup': objectgroup_handler,
            'animation': lambda _a: tile.animation.extend(parse_animation(reader)),
        })
        return tile


def parse_animation(reader: EventReader) -> List[Frame]:
    """Read the <frame> children of an <animation>, in order."""
    frames = []

    def frame_handler(attrs: Attributes):
        _, (tile_id, duration) = get_attrs(
            attrs,
            required=[('tileid', u32), ('duration', u32)],
            error="animation frame must have a tileid and a duration",
        )
        frames.append(Frame(tile_id=tile_id, duration=duration))

    parse_tag(reader, 'animation', {'frame': frame_handler})
    return frames
