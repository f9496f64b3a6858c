"""Persistent element names for parametric model geometry.

A mapped name records, inline, which operation and which object generation
produced a face, edge or vertex, so that references keep resolving after the
geometry kernel renumbers elements.  The package provides:

- :mod:`toponame.lazy`: copy-on-write storage cell
- :mod:`toponame.mapped_name`: the name type with its base/postfix split
- :mod:`toponame.postfix`: segment markers and encoders
- :mod:`toponame.tag_codec`: decoder for embedded tag segments
- :mod:`toponame.name_ref`: chain of candidate names for one element
"""

from __future__ import annotations

from .indexed_name import IndexedName
from .lazy import CowBox
from .mapped_name import MappedName
from .name_ref import MappedNameRef
from .postfix import PostfixEncodingError, encode_segment, encode_tag_postfix
from .string_id import StringIDRef
from .tag_codec import (
    TagCodec,
    TagCodecConfig,
    TagInfo,
    TagSegment,
    find_tag_in_element_name,
    parse_tag_segment,
)

__version__ = "0.1.0"

__all__ = [
    "CowBox",
    "IndexedName",
    "MappedName",
    "MappedNameRef",
    "PostfixEncodingError",
    "StringIDRef",
    "TagCodec",
    "TagCodecConfig",
    "TagInfo",
    "TagSegment",
    "encode_segment",
    "encode_tag_postfix",
    "find_tag_in_element_name",
    "parse_tag_segment",
]
