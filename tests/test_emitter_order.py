from __future__ import annotations

from typing import Dict, List

import pytest

from stackweave.core import BuildContext, Node, RuntimeArg, RuntimeArgConflict, build, emit, register, typ

ethernet = typ("ethernet")
arp = typ("arp")
ipv4 = typ("ipv4")
ipv6 = typ("ipv6")
dual = typ("dual-stack-ip")

link_conf = register("link", "link.Link", ethernet)
arp_conf = register("resolver", "resolver.Arp", arp, [ethernet])
v4_conf = register("v4", "ip.V4", ipv4, [ethernet, arp], slots=["gateway"])
v6_conf = register("v6", "ip.V6", ipv6, [ethernet], slots=["handle_ra"])
dual_conf = register("dual", "ip.Dual", dual, [ipv4, ipv6], slots=["ipv4_only", "ipv6_only"])


def _assert_topological(order: List[str], nodes: List[Node]) -> None:
    pos: Dict[str, int] = {ident: i for i, ident in enumerate(order)}
    for n in nodes:
        for d in n.deps:
            assert pos[d.ident] < pos[n.ident], f"{d.ident} must precede {n.ident}"


def test_dual_stack_scenario() -> None:
    ctx = BuildContext()
    link = ctx.apply(link_conf)
    res = ctx.apply(arp_conf, [link])
    v4 = ctx.apply(v4_conf, [link, res], {"gateway": RuntimeArg("ipv4-gateway")})
    v6 = ctx.apply(v6_conf, [link])
    stack = ctx.apply(dual_conf, [v4, v6])

    out = build(ctx.root(stack))

    assert out.statements == (
        "link_1 = link.Link.connect()",
        "resolver_2 = resolver.Arp.connect(link_1)",
        "v4_3 = ip.V4.connect(link_1, resolver_2, gateway=runtime_args['ipv4-gateway'])",
        "v6_4 = ip.V6.connect(link_1)",
        "dual_5 = ip.Dual.connect(v4_3, v6_4)",
    )
    assert out.root == "dual_5"
    assert [a.full_key for a in out.stack.runtime_args] == ["ipv4-gateway"]
    assert out.stack.imports == ("ip", "link", "resolver")


def test_diamond_is_emitted_once() -> None:
    ctx = BuildContext()
    link = ctx.apply(link_conf)
    left = ctx.apply(arp_conf, [link])
    right = ctx.apply(arp_conf, [link])
    v4 = ctx.apply(v4_conf, [link, left])
    v6 = ctx.apply(v6_conf, [link])
    stack = ctx.apply(dual_conf, [v4, v6])

    graph = ctx.root(stack)
    stack_out = emit(graph)
    idents = [b.ident for b in stack_out.bindings]

    assert idents.count("link_1") == 1
    # `right` is not reachable from the root
    assert right.ident not in idents
    assert len(idents) == len(graph) == 5
    _assert_topological(idents, graph.nodes())


def test_dependencies_precede_dependents_in_wide_graphs() -> None:
    ctx = BuildContext()
    links = [ctx.apply(link_conf) for _ in range(3)]
    arps = [ctx.apply(arp_conf, [l]) for l in links]
    v4s = [ctx.apply(v4_conf, [links[i], arps[(i + 1) % 3]]) for i in range(3)]
    v6 = ctx.apply(v6_conf, [links[2]])
    root = ctx.apply(dual_conf, [v4s[1], v6])

    graph = ctx.root(root)
    idents = [b.ident for b in emit(graph).bindings]
    assert len(idents) == len(set(idents))
    _assert_topological(idents, graph.nodes())
    assert idents[-1] == root.ident


def test_single_node_graph() -> None:
    ctx = BuildContext()
    out = build(ctx.root(ctx.apply(link_conf)))
    assert out.statements == ("link_1 = link.Link.connect()",)
    assert out.packages == {}


def test_shared_runtime_key_is_listed_once() -> None:
    ctx = BuildContext()
    link = ctx.apply(link_conf)
    res = ctx.apply(arp_conf, [link])
    v4 = ctx.apply(v4_conf, [link, res], {"gateway": RuntimeArg("ra", default="on")})
    v6 = ctx.apply(v6_conf, [link], {"handle_ra": RuntimeArg("ra", default="on")})

    out = emit(ctx.root(ctx.apply(dual_conf, [v4, v6])))
    assert [(a.full_key, a.default) for a in out.runtime_args] == [("ra", "on")]


def test_conflicting_runtime_defaults_are_rejected() -> None:
    ctx = BuildContext()
    link = ctx.apply(link_conf)
    res = ctx.apply(arp_conf, [link])
    v4 = ctx.apply(v4_conf, [link, res], {"gateway": RuntimeArg("gateway", default="10.0.0.1")})
    v6 = ctx.apply(v6_conf, [link], {"handle_ra": RuntimeArg("gateway", default="fd00::1")})

    with pytest.raises(RuntimeArgConflict) as ei:
        emit(ctx.root(ctx.apply(dual_conf, [v4, v6])))
    assert ei.value.details == {"key": "gateway", "defaults": ["10.0.0.1", "fd00::1"]}


def test_long_chain_emits_without_recursion_limit() -> None:
    hop_conf = register("hop", "chain.Hop", ethernet, [ethernet])
    ctx = BuildContext(log_applies=False)
    node = ctx.apply(link_conf)
    for _ in range(5000):
        node = ctx.apply(hop_conf, [node])

    graph = ctx.root(node)
    out = emit(graph)
    assert len(out.bindings) == len(graph) == 5001
    assert out.bindings[0].to_source() == "link_1 = link.Link.connect()"
    assert out.bindings[1].to_source() == "hop_2 = chain.Hop.connect(link_1)"
    assert out.root == "hop_5001"
