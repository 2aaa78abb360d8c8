# src/stackweave/core/packages.py
"""Package / version-constraint aggregation over a whole graph.

Every node contributes the packages of its descriptor. Ranges for the same
package are intersected: (max of the lower bounds, min of the upper bounds).
The table is checked only once every contribution has been merged, and the
result does not depend on traversal order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from stackweave.build_logging import log_event
from stackweave.core.errors import UnsatisfiableConstraint
from stackweave.core.node import Node
from stackweave.core.types import Package, Version, format_range

_LOG = logging.getLogger("stackweave.core")


@dataclass(frozen=True)
class MergedPackage:
    name: str
    min: Optional[str]
    max: Optional[str]
    sublibs: Tuple[str, ...]

    def to_json(self) -> Dict[str, object]:
        return {"name": self.name, "min": self.min, "max": self.max, "sublibs": list(self.sublibs)}

    def range_str(self) -> str:
        return format_range(self.min, self.max)


def _lower_key(p: Package) -> Tuple:
    v = p.lower()
    # unbounded lower sorts first; text breaks ties between equal versions
    return (0, (), "", p.range_str()) if v is None else (1, v.key(), v.text, p.range_str())


def _upper_key(p: Package) -> Tuple:
    v = p.upper()
    # unbounded upper sorts last
    return (1, (), "", p.range_str()) if v is None else (0, v.key(), v.text, p.range_str())


def _empty(lo: Optional[Version], hi: Optional[Version]) -> bool:
    if hi is None:
        return False
    if lo is None:
        # [*, 0) admits nothing
        return hi.key() <= (0,)
    return hi.key() <= lo.key()


def collect_packages(nodes: Iterable[Node]) -> Dict[str, List[Package]]:
    by_name: Dict[str, List[Package]] = {}
    for n in nodes:
        for p in n.descriptor.packages:
            by_name.setdefault(p.name, []).append(p)
    return by_name


def merge_constraints(nodes: Iterable[Node]) -> Dict[str, MergedPackage]:
    """Merge all package constraints of `nodes`; raise on an empty intersection.

    Returns a mapping sorted by package name.
    """
    by_name = collect_packages(nodes)

    merged: Dict[str, MergedPackage] = {}
    conflicts: List[UnsatisfiableConstraint] = []
    for name in sorted(by_name):
        cs = by_name[name]
        lo_src = max(cs, key=_lower_key)
        hi_src = min(cs, key=_upper_key)
        lo, hi = lo_src.lower(), hi_src.upper()
        if _empty(lo, hi):
            conflicts.append(UnsatisfiableConstraint.of(name, lo_src.range_str(), hi_src.range_str()))
            continue
        sublibs = tuple(sorted({s for c in cs for s in c.sublibs}))
        merged[name] = MergedPackage(
            name=name,
            min=lo.text if lo is not None else None,
            max=hi.text if hi is not None else None,
            sublibs=sublibs,
        )

    if conflicts:
        # First conflict by package name; the rest are listed in details.
        first = conflicts[0]
        if len(conflicts) > 1 and isinstance(first.details, dict):
            first.details["other_conflicts"] = [c.details.get("package") for c in conflicts[1:]]
        raise first

    log_event(_LOG, "constraints_merged", packages=len(merged))
    return merged
