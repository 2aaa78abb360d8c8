from __future__ import annotations

import itertools
from typing import Sequence

import pytest

from stackweave.core import (
    BuildContext,
    LabeledArg,
    UnsatisfiableConstraint,
    build,
    merge_constraints,
    package,
    register,
    typ,
)

dep = typ("dep")
top = typ("top")


def _graph(*ranges: tuple[str | None, str | None], sublibs: Sequence[Sequence[str]] = ()):
    ctx = BuildContext()
    leaves = []
    for i, (lo, hi) in enumerate(ranges):
        libs = sublibs[i] if i < len(sublibs) else ()
        d = register(f"leaf{i}", f"leaf{i}.Leaf", dep, packages=[package("foo", min=lo, max=hi, sublibs=libs)])
        leaves.append(ctx.apply(d))
    root_conf = register("top", "top.Top", top, [dep] * len(leaves))
    return ctx.root(ctx.apply(root_conf, leaves))


def test_overlapping_ranges_merge_to_intersection() -> None:
    merged = merge_constraints(_graph(("1.0", "3.0"), ("2.0", "4.0")).nodes())
    foo = merged["foo"]
    assert (foo.min, foo.max) == ("2.0", "3.0")


def test_adjacent_ranges_are_unsatisfiable() -> None:
    with pytest.raises(UnsatisfiableConstraint) as ei:
        merge_constraints(_graph(("1.0", "2.0"), ("2.0", "3.0")).nodes())
    assert ei.value.details["package"] == "foo"
    assert sorted(ei.value.details["ranges"]) == ["[1.0, 2.0)", "[2.0, 3.0)"]


def test_unbounded_sides_defer_to_the_other_constraint() -> None:
    merged = merge_constraints(_graph(("0.0.5", None), (None, "1.0.0")).nodes())
    assert (merged["foo"].min, merged["foo"].max) == ("0.0.5", "1.0.0")

    merged = merge_constraints(_graph((None, None), (None, None)).nodes())
    assert (merged["foo"].min, merged["foo"].max) == (None, None)


def test_sublibraries_are_unioned() -> None:
    g = _graph(("7.0.0", "9.0.0"), ("7.0.0", "9.0.0"), sublibs=[["ipv6"], ["ipv4", "ipv6"]])
    assert merge_constraints(g.nodes())["foo"].sublibs == ("ipv4", "ipv6")


def test_merge_is_order_independent() -> None:
    nodes = _graph(("1.0", "5.0"), ("2.0", None), (None, "4.0"), ("1.5", "4.5")).nodes()
    expected = merge_constraints(nodes)
    for perm in itertools.permutations(nodes):
        assert merge_constraints(perm) == expected


def test_conflict_report_is_order_independent() -> None:
    nodes = _graph(("1.0", "2.0"), ("3.0", "4.0"), ("0.5", "5.0")).nodes()
    reports = set()
    for perm in itertools.permutations(nodes):
        with pytest.raises(UnsatisfiableConstraint) as ei:
            merge_constraints(perm)
        reports.add(tuple(ei.value.details["ranges"]))
    assert reports == {("[3.0, 4.0)", "[1.0, 2.0)")}


def test_conflict_stops_the_build_before_emission() -> None:
    calls: list[str] = []

    def connect(modname: str, *, params: Sequence[LabeledArg]) -> str:
        calls.append(modname)
        return f"{modname}.connect()"

    ctx = BuildContext()
    a = ctx.apply(register("a", "a.A", dep, packages=[package("tcpip", min="7.0.0", max="9.0.0")], connect=connect))
    b = ctx.apply(register("b", "b.B", dep, packages=[package("tcpip", min="9.0.0", max="10.0.0")], connect=connect))
    root = ctx.apply(register("top", "top.Top", top, [dep, dep]), [a, b])

    with pytest.raises(UnsatisfiableConstraint):
        build(ctx.root(root))
    assert calls == []
