"""Decoder for the tag segments embedded in mapped names.

A tag segment records one model operation: the tag of the object that owns the
resulting shape, the length of the operation codes written before the segment
and the element type.  Two generations exist on the wire:

``;:H[-][tag][:len],T``
    Current generation.  Fields are hex, a zero tag may be omitted, and the
    length field may be omitted entirely.  ``len`` counts the characters of
    operation codes preceding the segment.

``;:T[-]tag:len,T``
    Legacy generation.  Fields are decimal and always present; ``len`` is the
    length of the name before the whole postfix.

The decoder looks at the *last* segment of a name.  In recursive mode a
segment with a zero tag is treated as anonymous and the search walks back
through the name until a segment with a non-zero tag is found::

    #94;:G0;XTR;:H19:8,F;:H1a,F;BND:-1:0;:H1b:10,F
                        |              |   ^^ ^^
                        |              |   |   |
                        ---len = 0x10---  tag len

Malformed segments are never partially decoded: every grammar violation is
reported as ``None``, exactly like a name without any tag.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional, Union

from .mapped_name import MappedName, TextLike
from .postfix import (
    ELEMENT_MAP_PREFIX,
    POSTFIX_DECIMAL_TAG,
    POSTFIX_TAG,
    POSTFIX_TAG_SIZE,
    encode_tag_postfix,
)

logger = logging.getLogger(__name__)

_TAG_BYTES = POSTFIX_TAG.encode("ascii")
_DECIMAL_TAG_BYTES = POSTFIX_DECIMAL_TAG.encode("ascii")
_PREFIX_BYTES = ELEMENT_MAP_PREFIX.encode("ascii")

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DEC_DIGITS = frozenset("0123456789")

NameLike = Union[MappedName, TextLike]


@dataclass(frozen=True)
class TagSegment:
    """Fields of a single tag segment exactly as written."""

    tag: int
    length: int
    type: str
    hex: bool = True


@dataclass(frozen=True)
class TagInfo:
    """Result of decoding the tag carried by a mapped name.

    ``position`` is the byte offset where the located segment starts and
    ``postfix`` the text from there to the end.  ``length`` is the number of
    leading bytes of the name that precede the operation recorded by ``tag``.
    """

    position: int
    tag: int
    length: int
    type: str
    postfix: str
    hex: bool = True


@dataclass(frozen=True)
class TagCodecConfig:
    """Options shared by decoding and encoding."""

    negative: bool = False
    recursive: bool = True
    hex: bool = True


DEFAULT_CONFIG = TagCodecConfig()


def _scan(body: str, start: int, digits: frozenset) -> int:
    end = start
    while end < len(body) and body[end] in digits:
        end += 1
    return end


def _parse_body(body: str, hex: bool) -> Optional[TagSegment]:
    digits = _HEX_DIGITS if hex else _DEC_DIGITS
    base = 16 if hex else 10
    size = len(body)

    pos = 0
    negative = body.startswith("-")
    if negative:
        pos = 1

    tag = 0
    if not (hex and pos < size and body[pos] in ",:"):
        end = _scan(body, pos, digits)
        if end == pos:
            return None
        tag = int(body[pos:end], base)
        pos = end

    if pos >= size:
        return None
    sep = body[pos]
    pos += 1

    length = 0
    if sep == ":":
        end = _scan(body, pos, digits)
        if end == pos:
            return None
        length = int(body[pos:end], base)
        pos = end
        if pos >= size:
            return None
        sep2 = body[pos]
        pos += 1
        # legacy segments were also written with ':' before the type
        if sep2 != "," and (hex or sep2 != ":"):
            return None
    elif not (hex and sep == ","):
        return None

    if pos != size - 1 or body[pos].isspace():
        return None
    return TagSegment(-tag if negative else tag, length, body[pos], hex)


def parse_tag_segment(segment: TextLike) -> Optional[TagSegment]:
    """Parse one complete tag segment, marker included.

    The fields are returned as written: the sign of the tag is kept and the
    length is not converted to an offset.
    """

    if isinstance(segment, str):
        text = segment
    else:
        try:
            text = bytes(segment).decode("ascii")
        except UnicodeDecodeError:
            return None
    if text.startswith(POSTFIX_TAG):
        return _parse_body(text[POSTFIX_TAG_SIZE:], True)
    if text.startswith(POSTFIX_DECIMAL_TAG):
        return _parse_body(text[POSTFIX_TAG_SIZE:], False)
    return None


def _name_bytes(name: NameLike) -> bytes:
    if isinstance(name, MappedName):
        return name.to_bytes()
    if isinstance(name, str):
        return name.encode("utf-8", "surrogateescape")
    return bytes(name)


def _nested_length(data: bytes, pos: int, length: int) -> int:
    """Shrink *length* to the operation codes after an embedded tag segment."""

    nested = data.rfind(_TAG_BYTES, pos - length, pos)
    if nested < 0:
        return length
    # ;:H1a,F;BND:-1:0;:H:10,F
    # ^      ^        ^
    # nested end      pos
    if nested == pos:
        return 0
    end = data.find(_PREFIX_BYTES, nested + 1, pos)
    if end < 0:
        return 0
    return pos - end


def _locate(data: bytes, negative: bool, recursive: bool) -> Optional[TagInfo]:
    hex = True
    pos = data.rfind(_TAG_BYTES)
    if pos < 0:
        hex = False
        pos = data.rfind(_DECIMAL_TAG_BYTES)
        if pos < 0:
            return None

    try:
        body = data[pos + POSTFIX_TAG_SIZE :].decode("ascii")
    except UnicodeDecodeError:
        logger.debug("Rejected tag segment at %d: non-ASCII body", pos)
        return None

    segment = _parse_body(body, hex)
    if segment is None:
        logger.debug("Rejected malformed tag segment at %d: %r", pos, body)
        return None

    # both generations count bytes before the segment
    length = segment.length
    if pos < length:
        logger.debug("Rejected tag segment at %d: length %d runs past the name", pos, length)
        return None
    if hex:
        if recursive and segment.tag == 0 and length:
            length = _nested_length(data, pos, length)
        length = pos - length

    tag = segment.tag
    if tag < 0 and not negative:
        tag = -tag
    return TagInfo(
        position=pos,
        tag=tag,
        length=length,
        type=segment.type,
        postfix=data[pos:].decode("utf-8", "surrogateescape"),
        hex=hex,
    )


def find_tag_in_element_name(
    name: NameLike,
    *,
    negative: bool = False,
    recursive: bool = True,
) -> Optional[TagInfo]:
    """Decode the last tag segment of *name*.

    ``negative`` keeps the sign of negative tags (used for disambiguation);
    otherwise the absolute value is reported.  ``recursive`` resolves
    zero-tag segments by walking back through the preceding part of the name.
    When the walk finds an earlier segment, its tag, length and type are
    reported while ``position`` and ``postfix`` still describe the segment
    located first.  Returns ``None`` when no well-formed segment is present.
    """

    data = _name_bytes(name)
    found = _locate(data, negative, recursive)
    if found is None or not recursive:
        return found

    current = found
    limit = len(data)
    while current.tag == 0 and 0 < current.length < limit:
        limit = current.length
        inner = _locate(data[:limit], negative, recursive)
        if inner is None:
            break
        current = inner

    if current is found:
        return found
    return dataclasses.replace(found, tag=current.tag, length=current.length, type=current.type)


class TagCodec:
    """Encoder/decoder bound to a :class:`TagCodecConfig`."""

    def __init__(self, config: Optional[TagCodecConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def decode(self, name: NameLike) -> Optional[TagInfo]:
        return find_tag_in_element_name(
            name,
            negative=self.config.negative,
            recursive=self.config.recursive,
        )

    def encode(self, tag: int, length: int, type_char: str) -> str:
        return encode_tag_postfix(tag, length, type_char, hex=self.config.hex)

    def stamp(self, name: MappedName, tag: int, length: int, type_char: str) -> MappedName:
        """Return *name* with a new tag segment appended."""

        return name + self.encode(tag, length, type_char)


__all__ = [
    "DEFAULT_CONFIG",
    "TagCodec",
    "TagCodecConfig",
    "TagInfo",
    "TagSegment",
    "find_tag_in_element_name",
    "parse_tag_segment",
]
