"""
Image references used by tilesets, tiles and image layers.

    <image source="terrain.png" width="256" height="256" trans="ff00ff"/>
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image as PILImage

from .attributes import Attributes, get_attrs, u32
from .colour import Colour
from .reader import EventReader, parse_tag


@dataclass
class Image:
    """
    Image file containing tile graphics.

    source: Path to image file (relative to the TMX/TSX file)
    width:  Image width in pixels (optional in older files)
    height: Image height in pixels (optional in older files)
    trans:  Transparent colour; pixels of this colour become transparent
    """
    source: str                          # Path to image file
    width: Optional[int] = None          # Image width (pixels)
    height: Optional[int] = None         # Image height (pixels)
    trans: Optional[Colour] = None       # Transparent colour

    @classmethod
    def from_xml(cls, reader: EventReader, attrs: Attributes) -> 'Image':
        """Parse image from its attributes; the element's children are skipped."""
        (width, height, trans), (source,) = get_attrs(
            attrs,
            optionals=[('width', u32), ('height', u32), ('trans', Colour.parse)],
            required=[('source', str)],
            error="image must have a source",
        )
        parse_tag(reader, 'image')
        return cls(source=source, width=width, height=height, trans=trans)

    def dimensions(self, base_dir: Union[str, Path]) -> Tuple[int, int]:
        """
        Return (width, height) in pixels.

        Uses the declared size when both are present; otherwise reads the
        header of the image file, resolved relative to `base_dir`.
        """
        if self.width is not None and self.height is not None:
            return self.width, self.height

        # PIL opens lazily: only the header is read here
        with PILImage.open(Path(base_dir) / self.source) as img:
            return img.size
