"""Chain of candidate names attached to one element.

Most elements carry a single mapped name.  When a merge leaves several equally
valid names (each with its own set of string id references), the extra
candidates are kept in a singly linked chain hanging off the head entry.
Each node owns its successor; there are no back references.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .mapped_name import MappedName, TextLike
from .string_id import StringIDRef

ElementIDRefs = Tuple[StringIDRef, ...]


def _as_name(name: Union[MappedName, TextLike, None]) -> MappedName:
    if name is None:
        return MappedName()
    if isinstance(name, MappedName):
        return name.copy()
    return MappedName(name)


class MappedNameRef:
    """Head (or interior node) of a mapped name chain."""

    __slots__ = ("name", "sids", "next")

    def __init__(
        self,
        name: Union[MappedName, TextLike, None] = None,
        sids: Iterable[StringIDRef] = (),
    ) -> None:
        self.name = _as_name(name)
        self.sids: ElementIDRefs = tuple(sids)
        self.next: Optional[MappedNameRef] = None
        self.compact()

    def compact(self) -> None:
        """Sort the id references and drop duplicates."""

        self.sids = tuple(sorted(set(self.sids)))

    def append(self, name: Union[MappedName, TextLike], sids: Iterable[StringIDRef] = ()) -> None:
        name = _as_name(name)
        if not name:
            return
        if not self.name:
            self.name = name
            self.sids = tuple(sids)
            self.compact()
            return
        tail = self
        while tail.next is not None:
            tail = tail.next
        tail.next = MappedNameRef(name, sids)

    def erase(self, name: Union[MappedName, TextLike]) -> bool:
        """Remove the first entry equal to *name*; return whether one was found."""

        name = _as_name(name)
        if not name:
            return False

        if self.name == name:
            successor = self.next
            if successor is None:
                self.name = MappedName()
                self.sids = ()
            else:
                self.name = successor.name
                self.sids = successor.sids
                self.next = successor.next
            return True

        node = self
        while node.next is not None:
            if node.next.name == name:
                node.next = node.next.next
                return True
            node = node.next
        return False

    def clear(self) -> None:
        self.name = MappedName()
        self.sids = ()
        self.next = None

    def copy(self) -> "MappedNameRef":
        """Copy the head entry; successors are not carried over."""

        return MappedNameRef(self.name, self.sids)

    __copy__ = copy

    def __bool__(self) -> bool:
        return bool(self.name)

    def __iter__(self) -> Iterator["MappedNameRef"]:
        node: Optional[MappedNameRef] = self
        while node is not None:
            if node.name:
                yield node
            node = node.next

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def names(self) -> List[MappedName]:
        return [node.name for node in self]

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        entries = ", ".join(f"{node.name.to_string()!r}: {list(node.sids)!r}" for node in self)
        return f"MappedNameRef([{entries}])"


__all__ = ["ElementIDRefs", "MappedNameRef"]
