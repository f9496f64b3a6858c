"""Element-map markers and the writers for provenance segments.

Every provenance segment appended to a mapped name starts with the element-map
prefix ``;``.  Tag segments carry the owning object tag, the length of the
operation codes preceding the segment and the element type::

    Face6;:M2;FUS;:H1:8,F
                 ^^^ ^ ^
                 |   | element type (F face, E edge, V vertex)
                 |   length of ";:M2;FUS" in hex
                 tag in hex

The current generation writes hex fields behind ``;:H``; the legacy
generation wrote decimal fields behind ``;:T``.  All other markers are opaque
to the codec and are only listed here so callers build them consistently.
"""

from __future__ import annotations

ELEMENT_MAP_PREFIX = ";"
MISSING_PREFIX = "?"

POSTFIX_TAG = ELEMENT_MAP_PREFIX + ":H"
POSTFIX_DECIMAL_TAG = ELEMENT_MAP_PREFIX + ":T"
POSTFIX_EXTERNAL_TAG = ELEMENT_MAP_PREFIX + ":X"
POSTFIX_CHILD = ELEMENT_MAP_PREFIX + ":C"

POSTFIX_INDEX = ELEMENT_MAP_PREFIX + ":I"
POSTFIX_UPPER = ELEMENT_MAP_PREFIX + ":U"
POSTFIX_LOWER = ELEMENT_MAP_PREFIX + ":L"
POSTFIX_MOD = ELEMENT_MAP_PREFIX + ":M"
POSTFIX_GEN = ELEMENT_MAP_PREFIX + ":G"
POSTFIX_MODGEN = ELEMENT_MAP_PREFIX + ":MG"
POSTFIX_DUPLICATE = ELEMENT_MAP_PREFIX + "D"

POSTFIX_TAG_SIZE = len(POSTFIX_TAG)

# Characters with a structural meaning inside a tag segment body.
_RESERVED_TYPE_CHARS = frozenset(",:;-")


class PostfixEncodingError(ValueError):
    """Raised when a provenance segment cannot be encoded."""


def is_mapped_name(text: str) -> bool:
    """Return ``True`` when *text* carries the element-map prefix."""

    return text.startswith(ELEMENT_MAP_PREFIX)


def strip_element_map_prefix(text: str) -> str:
    """Remove a single leading element-map prefix from *text*."""

    if text.startswith(ELEMENT_MAP_PREFIX):
        return text[len(ELEMENT_MAP_PREFIX) :]
    return text


def _check_type_char(type_char: str) -> None:
    if (
        not isinstance(type_char, str)
        or len(type_char) != 1
        or type_char.isspace()
        or type_char in _RESERVED_TYPE_CHARS
        or not type_char.isascii()
    ):
        raise PostfixEncodingError(f"Invalid element type character {type_char!r}")


def encode_tag_postfix(tag: int, length: int, type_char: str, *, hex: bool = True) -> str:
    """Encode a tag segment.

    ``length`` counts the characters of operation codes written before this
    segment.  The hex generation omits a zero tag and a zero length; the
    legacy decimal generation always writes both fields.
    """

    if length < 0:
        raise PostfixEncodingError(f"Tag segment length must be non-negative, got {length}")
    _check_type_char(type_char)

    if not hex:
        return f"{POSTFIX_DECIMAL_TAG}{int(tag)}:{int(length)},{type_char}"

    parts = [POSTFIX_TAG]
    if tag < 0:
        parts.append("-")
    if tag:
        parts.append(format(abs(int(tag)), "x"))
    if length:
        parts.append(":" + format(int(length), "x"))
    parts.append("," + type_char)
    return "".join(parts)


def encode_segment(marker: str, value: object = "") -> str:
    """Encode an opaque provenance segment such as ``;:M2`` or ``;:G0``."""

    if not marker.startswith(ELEMENT_MAP_PREFIX):
        raise PostfixEncodingError(f"Segment marker {marker!r} lacks the element-map prefix")
    return f"{marker}{value}"


__all__ = [
    "ELEMENT_MAP_PREFIX",
    "MISSING_PREFIX",
    "POSTFIX_CHILD",
    "POSTFIX_DECIMAL_TAG",
    "POSTFIX_DUPLICATE",
    "POSTFIX_EXTERNAL_TAG",
    "POSTFIX_GEN",
    "POSTFIX_INDEX",
    "POSTFIX_LOWER",
    "POSTFIX_MOD",
    "POSTFIX_MODGEN",
    "POSTFIX_TAG",
    "POSTFIX_TAG_SIZE",
    "POSTFIX_UPPER",
    "PostfixEncodingError",
    "encode_segment",
    "encode_tag_postfix",
    "is_mapped_name",
    "strip_element_map_prefix",
]
