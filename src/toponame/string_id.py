"""Reference to a hashed string identifier.

The hashing subsystem that hands these out lives outside this package; names
only need an orderable, hashable token with a byte form to embed.
"""

from __future__ import annotations

from dataclasses import dataclass

STRING_ID_PREFIX = b"#"


@dataclass(frozen=True, order=True)
class StringIDRef:
    value: int
    hasher: int = 0

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"String id must be non-negative, got {self.value}")

    def to_bytes(self) -> bytes:
        return STRING_ID_PREFIX + format(self.value, "x").encode("ascii")

    def __str__(self) -> str:
        return self.to_bytes().decode("ascii")


__all__ = ["STRING_ID_PREFIX", "StringIDRef"]
