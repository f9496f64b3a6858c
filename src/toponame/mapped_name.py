"""Mapped element names.

A :class:`MappedName` is a byte string split into a *base* (the stable part,
for instance ``Face6``) and a *postfix* (the provenance segments appended by
later operations).  The bytes live in a :class:`~toponame.lazy.CowBox`, so
copying a name is O(1) until one of the copies is modified.

Text arguments are encoded as UTF-8; every offset handled by this module is a
byte offset into the combined base and postfix.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Union

from .indexed_name import IndexedName
from .lazy import CowBox
from .postfix import ELEMENT_MAP_PREFIX
from .string_id import StringIDRef

if TYPE_CHECKING:  # pragma: no cover - imported for static analyzers
    from .tag_codec import TagInfo

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"
_PREFIX_BYTES = ELEMENT_MAP_PREFIX.encode(_ENCODING)

TextLike = Union[str, bytes, bytearray, memoryview]
NameSource = Union[TextLike, "MappedName", IndexedName, StringIDRef]


def _encode(data: TextLike) -> bytes:
    if isinstance(data, str):
        return data.encode(_ENCODING, _ERRORS)
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Expected text or bytes, got {type(data).__name__}")


def _decode(data: bytes | bytearray) -> str:
    return bytes(data).decode(_ENCODING, _ERRORS)


def _window(data: bytes | bytearray, start: int, size: Optional[int]) -> bytes:
    if start < 0:
        raise ValueError(f"start must be non-negative, got {start}")
    if size is None:
        return bytes(data[start:])
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")
    return bytes(data[start : start + size])


class MappedName:
    """Element name with provenance postfix and copy-on-write storage.

    Names hash by content and are mutable, so a name used as a dict key or set
    member must not be modified afterwards.  Store a :meth:`copy` instead; it
    is O(1) and is detached from later edits of the original.
    """

    __slots__ = ("_data", "_postfix_start")

    def __init__(
        self,
        source: Optional[NameSource] = None,
        start: int = 0,
        size: Optional[int] = None,
        *,
        postfix: Optional[TextLike] = None,
    ) -> None:
        self._postfix_start = 0

        if isinstance(source, MappedName):
            if postfix is not None:
                if start != 0 or size is not None:
                    raise TypeError("start and size cannot be combined with postfix")
                buffer = bytearray(source._data.view_const())
                buffer += _encode(postfix)
                self._data: CowBox[bytearray] = CowBox(buffer)
                self._postfix_start = len(source)
            elif start == 0 and size is None:
                self._data = source._data.copy()
                self._postfix_start = source._postfix_start
            else:
                self._data = CowBox(bytearray())
                self.append(source, start, size)
            return

        if postfix is not None or start != 0 or size is not None:
            raise TypeError("start, size and postfix require a MappedName source")

        if source is None:
            self._data = CowBox(bytearray())
        elif isinstance(source, IndexedName):
            self._data = CowBox(bytearray(str(source).encode("ascii")))
        elif isinstance(source, StringIDRef):
            self._data = CowBox(bytearray(source.to_bytes()))
        else:
            raw = _encode(source)
            if raw.startswith(_PREFIX_BYTES):
                raw = raw[len(_PREFIX_BYTES) :]
            self._data = CowBox(bytearray(raw))
        self._postfix_start = len(self._data.view_const())

    # ------------------------------------------------------------------
    # Explicit constructors

    @classmethod
    def from_indexed(cls, element: IndexedName) -> "MappedName":
        return cls(element)

    @classmethod
    def from_string_id(cls, sid: StringIDRef) -> "MappedName":
        return cls(sid)

    @classmethod
    def slice_of(cls, other: "MappedName", start: int = 0, size: Optional[int] = None) -> "MappedName":
        """Return the bytes ``[start, start + size)`` of *other* as a new name."""

        name = cls()
        name.append(other, start, size)
        return name

    @classmethod
    def with_postfix(cls, other: "MappedName", postfix: TextLike) -> "MappedName":
        """Return *other* followed by *postfix*, which becomes the new postfix."""

        return cls(other, postfix=postfix)

    # ------------------------------------------------------------------
    # Mutation

    def append(self, data: Union[TextLike, "MappedName"], start: int = 0, size: Optional[int] = None) -> None:
        """Append bytes, recomputing the base/postfix split on an empty receiver."""

        was_empty = not self._data.view_const()
        if isinstance(data, MappedName):
            chunk = _window(data._data.view_const(), start, size)
            if was_empty and data._postfix_start >= start:
                self._postfix_start = min(data._postfix_start - start, len(chunk))
        else:
            chunk = _window(_encode(data), start, size)
            if was_empty:
                self._postfix_start = len(chunk)
        if chunk:
            self._data.view_mut().extend(chunk)

    def __iadd__(self, other: Union[TextLike, "MappedName"]) -> "MappedName":
        self.append(other)
        return self

    def __add__(self, other: Union[TextLike, "MappedName"]) -> "MappedName":
        result = self.copy()
        result.append(other)
        return result

    def assign(self, source: NameSource) -> None:
        """Replace the value as if freshly constructed from *source*."""

        fresh = MappedName(source)
        self._data = fresh._data
        self._postfix_start = fresh._postfix_start

    def clear(self) -> None:
        self._data.assign(bytearray())
        self._postfix_start = 0

    def copy(self) -> "MappedName":
        """Return a name sharing this name's storage."""

        return MappedName(self)

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> "MappedName":
        name = MappedName()
        name._data = CowBox(bytearray(self._data.view_const()))
        name._postfix_start = self._postfix_start
        return name

    def is_unshared(self) -> bool:
        return self._data.is_unshared()

    # ------------------------------------------------------------------
    # Reads

    @property
    def postfix_start(self) -> int:
        return self._postfix_start

    def to_bytes(self) -> bytes:
        return bytes(self._data.view_const())

    def to_string(self) -> str:
        return _decode(self._data.view_const())

    def name(self) -> str:
        """Return the base, i.e. everything before the postfix."""

        return _decode(self._data.view_const()[: self._postfix_start])

    def postfix(self) -> str:
        return _decode(self._data.view_const()[self._postfix_start :])

    def to_indexed_name(self) -> Optional[IndexedName]:
        """Return the typed+indexed key this name was built from, if any.

        Names carrying a postfix, or whose base is not ``Kind[digits]``,
        yield ``None``.
        """

        data = self._data.view_const()
        if not data or self._postfix_start != len(data):
            return None
        return IndexedName.parse(_decode(data))

    def compare(self, other: "MappedName") -> int:
        mine = self._data.view_const()
        theirs = other._data.view_const()
        if mine < theirs:
            return -1
        if mine > theirs:
            return 1
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappedName):
            return NotImplemented
        return self._data.view_const() == other._data.view_const()

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, MappedName):
            return NotImplemented
        return self._data.view_const() != other._data.view_const()

    def __lt__(self, other: "MappedName") -> bool:
        if not isinstance(other, MappedName):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: "MappedName") -> bool:
        if not isinstance(other, MappedName):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: "MappedName") -> bool:
        if not isinstance(other, MappedName):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: "MappedName") -> bool:
        if not isinstance(other, MappedName):
            return NotImplemented
        return self.compare(other) >= 0

    def __hash__(self) -> int:
        return hash(bytes(self._data.view_const()))

    def __getitem__(self, index: Union[int, slice]) -> Union[str, "MappedName"]:
        if isinstance(index, slice):
            start, stop, step = index.indices(len(self))
            if step != 1:
                raise ValueError("MappedName slices do not support a step")
            return MappedName.slice_of(self, start, max(0, stop - start))
        return chr(self._data.view_const()[index])

    def __len__(self) -> int:
        return len(self._data.view_const())

    def size(self) -> int:
        return len(self._data.view_const())

    def empty(self) -> bool:
        return not self._data.view_const()

    def __bool__(self) -> bool:
        return bool(self._data.view_const())

    def find(self, target: TextLike, start: int = 0) -> int:
        """Return the first offset of *target* at or after *start*, or -1."""

        return self._data.view_const().find(_encode(target), start)

    def rfind(self, target: TextLike, start: Optional[int] = None) -> int:
        """Return the last offset of *target* beginning at or before *start*, or -1."""

        needle = _encode(target)
        data = self._data.view_const()
        if start is None:
            return data.rfind(needle)
        return data.rfind(needle, 0, max(0, start) + len(needle))

    def starts_with(self, target: TextLike, offset: int = 0) -> bool:
        return self._data.view_const()[offset:].startswith(_encode(target))

    def ends_with(self, target: TextLike) -> bool:
        return self._data.view_const().endswith(_encode(target))

    def find_tag_in_element_name(self, negative: bool = False, recursive: bool = True) -> Optional["TagInfo"]:
        """Decode the last tag segment of this name, see :mod:`toponame.tag_codec`."""

        from .tag_codec import find_tag_in_element_name

        return find_tag_in_element_name(self, negative=negative, recursive=recursive)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"MappedName({self.to_string()!r})"


__all__ = ["MappedName", "NameSource", "TextLike"]
