#!/usr/bin/env python3

"""
TMX Parser - print a summary of a Tiled map

Usage:
    python -m tmx_parser <map.tmx>

Environment:
    TMX_PARSER_LOG_LEVEL  Logging level (default WARNING)
"""

import logging
import os
import sys
from collections import Counter
from pathlib import Path

from .errors import TiledError
from .map import TiledMap, parse_file


def summarize(tiled_map: TiledMap) -> str:
    lines = [
        f"Map: {tiled_map.width}x{tiled_map.height} tiles of "
        f"{tiled_map.tile_width}x{tiled_map.tile_height} px "
        f"({tiled_map.orientation.value}, version {tiled_map.version})",
        f"Tilesets: {len(tiled_map.tilesets)}",
    ]
    for tileset in tiled_map.tilesets:
        origin = f" from {tileset.source}" if tileset.source else ""
        lines.append(f"  [{tileset.first_gid}] {tileset.name}{origin}")

    lines.append(f"Tile layers: {len(tiled_map.layers)}")
    for layer in tiled_map.layers:
        lines.append(f"  {layer.name} ({layer.width}x{layer.height})")

    lines.append(f"Image layers: {len(tiled_map.image_layers)}")
    lines.append(f"Object groups: {len(tiled_map.object_groups)}")
    for group in tiled_map.object_groups:
        shapes = Counter(type(obj.shape).__name__ for obj in group.objects)
        detail = ", ".join(f"{count} {name}" for name, count in sorted(shapes.items()))
        lines.append(f"  {group.name}: {len(group.objects)} objects"
                     + (f" ({detail})" if detail else ""))
    return "\n".join(lines)


def log_level() -> int:
    """Level named by TMX_PARSER_LOG_LEVEL; WARNING when unset or unknown."""
    level = logging.getLevelName(os.getenv("TMX_PARSER_LOG_LEVEL", "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def main():
    logging.basicConfig(level=log_level())

    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    source_path = sys.argv[1]

    if not Path(source_path).exists():
        print(f"Error: File '{source_path}' not found")
        sys.exit(1)

    try:
        tiled_map = parse_file(source_path)
    except TiledError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(summarize(tiled_map))


if __name__ == "__main__":
    main()
