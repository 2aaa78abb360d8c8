from __future__ import annotations

import pytest

from stackweave.core import ArityMismatch, BuildContext, TagMismatch, UnknownParameter, register, typ

ethernet = typ("ethernet")
arp = typ("arp")
ipv4 = typ("ipv4")

link_conf = register("link", "link.Link", ethernet)
arp_conf = register("resolver", "resolver.Arp", arp, [ethernet])
v4_conf = register("v4", "ip.V4", ipv4, [ethernet, arp], slots=["gateway", "no_init"])


def _link_and_arp(ctx: BuildContext):
    link = ctx.apply(link_conf)
    return link, ctx.apply(arp_conf, [link])


def test_apply_keeps_dependencies_in_order() -> None:
    ctx = BuildContext()
    link, res = _link_and_arp(ctx)
    node = ctx.apply(v4_conf, [link, res], {"gateway": "10.0.0.1"})

    assert node.deps == (link, res)
    assert node.output == ipv4
    assert node.params.names == ("gateway", "no_init")
    assert node.params.supplied == 1


def test_missing_dependency_is_arity_mismatch() -> None:
    ctx = BuildContext()
    link, _ = _link_and_arp(ctx)

    with pytest.raises(ArityMismatch) as ei:
        ctx.apply(v4_conf, [link])
    assert ei.value.details == {"node": "v4", "expected": 2, "observed": 1}


def test_swapped_dependencies_are_tag_mismatch() -> None:
    ctx = BuildContext()
    link, res = _link_and_arp(ctx)

    with pytest.raises(TagMismatch) as ei:
        ctx.apply(v4_conf, [res, link])
    assert ei.value.details["index"] == 0
    assert ei.value.details["expected"] == "ethernet"
    assert ei.value.details["actual"] == "arp"


def test_non_node_dependency_is_rejected() -> None:
    ctx = BuildContext()
    with pytest.raises(TagMismatch):
        ctx.apply(arp_conf, ["link_1"])  # type: ignore[list-item]


def test_unknown_parameter_is_rejected() -> None:
    ctx = BuildContext()
    link, res = _link_and_arp(ctx)

    with pytest.raises(UnknownParameter) as ei:
        ctx.apply(v4_conf, [link, res], {"gatway": "10.0.0.1"})
    assert ei.value.details["unknown"] == ["gatway"]


def test_identifiers_are_fresh_and_scoped_to_the_context() -> None:
    ctx = BuildContext()
    a = ctx.apply(link_conf)
    b = ctx.apply(link_conf)
    assert (a.ident, b.ident) == ("link_1", "link_2")
    assert a is not b

    other = BuildContext()
    assert other.apply(link_conf).ident == "link_1"


def test_failed_apply_does_not_consume_an_identifier() -> None:
    ctx = BuildContext()
    link = ctx.apply(link_conf)
    with pytest.raises(ArityMismatch):
        ctx.apply(v4_conf, [link])
    assert ctx.apply(arp_conf, [link]).ident == "resolver_2"


def test_default_reuses_one_node_per_run() -> None:
    ctx = BuildContext()
    assert ctx.default(link_conf) is ctx.default(link_conf)
    assert BuildContext().default(link_conf).ident == "link_1"


def test_root_requires_a_node() -> None:
    ctx = BuildContext()
    with pytest.raises(TypeError):
        ctx.root("link_1")  # type: ignore[arg-type]


def test_tags_compare_by_name() -> None:
    assert typ("ipv4") == typ("ipv4")
    assert typ(" ipv4 ") == typ("ipv4")
    assert typ("ipv4") != typ("ipv6")
    assert str(typ("ipv4")) == "ipv4"
