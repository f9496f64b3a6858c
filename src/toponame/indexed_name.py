"""Typed+indexed element keys such as ``Face3`` or ``Edge12``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_INDEXED_NAME_RE = re.compile(r"([A-Za-z_]+)([0-9]*)")
_TYPE_RE = re.compile(r"[A-Za-z_]+")


@dataclass(frozen=True, order=True)
class IndexedName:
    """Element kind plus a non-negative index; index 0 means unindexed."""

    type: str
    index: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.type, str) or _TYPE_RE.fullmatch(self.type) is None:
            raise ValueError(f"Invalid element type {self.type!r}")
        if self.index < 0:
            raise ValueError(f"Element index must be non-negative, got {self.index}")

    @classmethod
    def parse(cls, text: str) -> Optional["IndexedName"]:
        """Parse ``Kind[digits]``; return ``None`` for anything else."""

        match = _INDEXED_NAME_RE.fullmatch(text)
        if match is None:
            return None
        kind, digits = match.groups()
        return cls(kind, int(digits) if digits else 0)

    def __str__(self) -> str:
        if self.index > 0:
            return f"{self.type}{self.index}"
        return self.type


__all__ = ["IndexedName"]
