"""Shared test fixtures."""

import pytest

from tmx_parser.reader import START, EventReader


def open_element(xml: str):
    """Return (reader, attributes) with the reader just past the root start tag."""
    reader = EventReader(xml)
    event = reader.next()
    assert event.kind == START
    return reader, event.attributes


EMBEDDED_MAP = '''<?xml version="1.0" encoding="UTF-8"?>
<map version="1.10" orientation="orthogonal" renderorder="right-down"
     width="3" height="2" tilewidth="16" tileheight="16" backgroundcolor="#336699">
  <properties>
    <property name="title" value="Test level"/>
  </properties>
  <tileset firstgid="1" name="terrain" tilewidth="16" tileheight="16" spacing="1" margin="2">
    <image source="terrain.png" width="64" height="64"/>
    <tile id="3" type="water">
      <properties>
        <property name="solid" type="bool" value="false"/>
      </properties>
    </tile>
  </tileset>
  <layer name="Ground" width="3" height="2">
    <data encoding="csv">
1,2,3,
4,5,6
    </data>
  </layer>
  <editorsettings><export target="out.json"/></editorsettings>
  <objectgroup name="Spawns" color="#ff0000">
    <object id="1" name="player" x="8" y="8"/>
    <object id="2" x="10" y="20">
      <polygon points="0,0 10,0 10,10"/>
    </object>
  </objectgroup>
</map>
'''

EXTERNAL_TSX = '''<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE tileset>
<tileset version="1.10" name="props" tilewidth="32" tileheight="48" tilecount="4" columns="2">
  <image source="props.png" width="64" height="96"/>
  <tile id="0">
    <animation>
      <frame tileid="0" duration="100"/>
      <frame tileid="1" duration="150"/>
    </animation>
  </tile>
</tileset>
'''

EXTERNAL_MAP = '''<?xml version="1.0" encoding="UTF-8"?>
<map version="1.10" orientation="isometric" width="2" height="2" tilewidth="32" tileheight="16">
  <tileset firstgid="1" name="terrain" tilewidth="32" tileheight="16"/>
  <tileset firstgid="17" source="tilesets/props.tsx"/>
  <layer name="Ground">
    <data encoding="csv">1,17,18,0</data>
  </layer>
</map>
'''


@pytest.fixture
def map_dir(tmp_path):
    """Directory with a map referencing an external tileset in a subfolder."""
    (tmp_path / "tilesets").mkdir()
    (tmp_path / "tilesets" / "props.tsx").write_text(EXTERNAL_TSX, encoding="utf-8")
    (tmp_path / "level.tmx").write_text(EXTERNAL_MAP, encoding="utf-8")
    return tmp_path
