"""
Custom properties attached to maps, layers, tilesets, tiles and objects.

XML format:

    <properties>
        <property name="solid" type="bool" value="true"/>
        <property name="health" type="int" value="100"/>
        <property name="description" value="A wooden door"/>
        <property name="dialogue">Line one
    Line two</property>
        <property name="stats" type="class">
            <properties>
                <property name="speed" type="float" value="1.5"/>
            </properties>
        </property>
    </properties>
"""

from dataclasses import dataclass
from typing import Any, Dict

from .attributes import Attributes, get_attrs, number, u32
from .colour import Colour
from .errors import MalformedAttributes
from .reader import EventReader, parse_tag

Properties = Dict[str, 'Property']


def _parse_bool(value: str) -> bool:
    if value not in ('true', 'false'):
        raise ValueError(f"invalid bool: {value!r}")
    return value == 'true'


# Conversion from the XML string to a Python value, by property type
# ("class" is handled separately: its value is a nested properties block)
PROPERTY_TYPES = {
    'string': str,
    'file': str,
    'int': int,
    'float': number,
    'bool': _parse_bool,
    'color': Colour.parse,
    'object': u32,
}


@dataclass
class Property:
    """
    One typed property value.

    SUPPORTED TYPES

    - string / file: Text value (default)
    - int: Integer number
    - float: Decimal number
    - bool: True/False
    - color: Colour
    - object: Id of another object (0 = none)
    - class: Nested Properties
    """
    type: str = "string"         # Value type
    value: Any = None            # The actual value


def parse_properties(reader: EventReader) -> Properties:
    """
    Read a <properties> block.

    The reader must be positioned just after <properties>; on return it is
    positioned just after </properties>. Later duplicates of a name
    overwrite earlier ones.
    """
    properties: Properties = {}

    def property_handler(attrs: Attributes):
        (prop_type, value), (name,) = get_attrs(
            attrs,
            optionals=[('type', str), ('value', str)],
            required=[('name', str)],
            error="property must have a name",
        )
        prop_type = prop_type or 'string'
        properties[name] = _parse_value(reader, name, prop_type, value)

    parse_tag(reader, 'properties', {'property': property_handler})
    return properties


def _parse_value(reader: EventReader, name: str, prop_type: str, value) -> Property:
    # -----------------------------------------------------------------
    # CLASS: nested <properties> inside the <property> element
    # -----------------------------------------------------------------
    if prop_type == 'class':
        members: Properties = {}

        def members_handler(_attrs):
            members.update(parse_properties(reader))

        parse_tag(reader, 'property', {'properties': members_handler})
        return Property(type='class', value=members)

    converter = PROPERTY_TYPES.get(prop_type)
    if converter is None:
        raise MalformedAttributes(f"unknown property type {prop_type!r} for {name!r}")

    # Multi-line strings are stored as element text instead of value=""
    if value is None:
        value = reader.read_text('property')

    # Tiled writes an unset colour as an empty value
    if prop_type == 'color' and not value:
        return Property(type='color', value=None)

    try:
        return Property(type=prop_type, value=converter(value))
    except ValueError:
        raise MalformedAttributes(
            f"property {name!r} has a value that is not a valid {prop_type}")
