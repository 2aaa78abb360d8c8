# src/stackweave/core/types.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Tuple


@dataclass(frozen=True, slots=True)
class CapabilityTag:
    """What a node produces. Two tags with the same name are interchangeable."""

    name: str

    def __str__(self) -> str:
        return self.name


def typ(name: str) -> CapabilityTag:
    return CapabilityTag(str(name).strip())


_VERSION_RE = re.compile(r"^\d+(\.\d+)*$")


class Version(NamedTuple):
    parts: Tuple[int, ...]
    text: str

    def key(self) -> Tuple[int, ...]:
        # "2.0" == "2.0.0"
        p = list(self.parts)
        while len(p) > 1 and p[-1] == 0:
            p.pop()
        return tuple(p)

    def __str__(self) -> str:
        return self.text


def parse_version(raw: str) -> Version:
    s = str(raw).strip()
    if not _VERSION_RE.match(s):
        raise ValueError(f"invalid version: {raw!r}")
    return Version(tuple(int(x) for x in s.split(".")), s)


@dataclass(frozen=True)
class Package:
    """A package requirement with a half-open accepted range [min, max).

    Either bound may be None (unbounded).
    """

    name: str
    min: Optional[str] = None
    max: Optional[str] = None
    sublibs: Tuple[str, ...] = field(default_factory=tuple)

    def lower(self) -> Optional[Version]:
        return parse_version(self.min) if self.min is not None else None

    def upper(self) -> Optional[Version]:
        return parse_version(self.max) if self.max is not None else None

    def range_str(self) -> str:
        return format_range(self.min, self.max)


def package(
    name: str,
    *,
    min: Optional[str] = None,
    max: Optional[str] = None,
    sublibs: Tuple[str, ...] | list[str] = (),
) -> Package:
    return Package(name=name, min=min, max=max, sublibs=tuple(sublibs))


def format_range(lo: Optional[str], hi: Optional[str]) -> str:
    return f"[{lo if lo is not None else '*'}, {hi if hi is not None else '*'})"
