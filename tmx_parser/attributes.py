"""
Attribute extraction for TMX tags.

=============================================================================
HOW ATTRIBUTES ARE VALIDATED
=============================================================================

Each constructor declares the attributes it understands as two ordered
lists of (name, coercion) specs:

    optionals, (x, y) = get_attrs(
        attrs,
        optionals=[("id", u32), ("name", str), ("width", number)],
        required=[("x", number), ("y", number)],
        error="objects must have an x and a y number",
    )

- OPTIONAL key present and coercible  -> value
- OPTIONAL key present but bad        -> None (treated as absent)
- OPTIONAL key missing                -> None
- REQUIRED key missing or bad         -> MalformedAttributes(error)

Defaults are applied by the caller, which knows what "absent" means for
each field.

A coercion is any callable str -> value. It signals failure by raising
ValueError/TypeError or by returning None.

=============================================================================
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

from .errors import MalformedAttributes

# Flat list of (name, value) pairs, in document order
Attributes = List[Tuple[str, str]]
Coercion = Callable[[str], Any]
AttrSpec = Tuple[str, Coercion]


def _coerce(coercion: Coercion, value: str) -> Optional[Any]:
    try:
        return coercion(value)
    except (ValueError, TypeError):
        return None


def get_attrs(attrs: Attributes,
              optionals: Sequence[AttrSpec] = (),
              required: Sequence[AttrSpec] = (),
              error: str = "malformed attributes") -> Tuple[tuple, tuple]:
    """
    Validate and coerce the attributes of one tag.

    Parameters:
    -----------
    attrs : list of (name, value)
        Raw attributes of the tag
    optionals : sequence of (name, coercion)
        Keys that may be missing or malformed
    required : sequence of (name, coercion)
        Keys that must be present and coercible
    error : str
        Message of the MalformedAttributes raised on any required failure

    Returns:
    --------
    (optional_values, required_values) : tuple, tuple
        Results in declaration order
    """
    lookup = dict(attrs)

    optional_values = []
    for key, coercion in optionals:
        value = lookup.get(key)
        optional_values.append(None if value is None else _coerce(coercion, value))

    required_values = []
    for key, coercion in required:
        value = lookup.get(key)
        coerced = None if value is None else _coerce(coercion, value)
        if coerced is None:
            raise MalformedAttributes(error)
        required_values.append(coerced)

    return tuple(optional_values), tuple(required_values)


# =============================================================================
# COERCIONS
# =============================================================================

def u32(value: str) -> int:
    """
    Unsigned 32-bit integer (ids, gids, pixel sizes).

    Only plain ASCII digits: no sign, padding or digit separators.
    """
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"{value!r} is not an unsigned integer")
    number = int(value)
    if number > 0xFFFFFFFF:
        raise ValueError(f"{value!r} is out of range for u32")
    return number


def number(value: str) -> float:
    """Decimal number (positions, sizes, opacity); no padding or '_'."""
    if '_' in value or value != value.strip():
        raise ValueError(f"{value!r} is not a number")
    return float(value)


def visibility(value: str) -> bool:
    """
    Visibility flag.

    Tiled writes "0"/"1"; any integer other than 1 means hidden.
    "true"/"false" are accepted too.
    """
    lowered = value.strip().lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'
    return int(lowered) == 1
