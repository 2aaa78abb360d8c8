# src/stackweave/devices/stack.py
"""Transport stack and name-resolution devices consumed by connection helpers."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from stackweave.core import BuildContext, LabeledArg, Node, connect_call, package, register, typ
from stackweave.devices.arp import arpv4
from stackweave.devices.ethernet import ethernet
from stackweave.devices.ip import ipv4v6, tcpip_package
from stackweave.devices.misc import default_monotonic_clock, default_random, mclock, network, random

stackv4v6 = typ("stackv4v6")
happy_eyeballs = typ("happy_eyeballs")
dns_client = typ("dns_client")


direct_stackv4v6_conf = register(
    "stackv4v6",
    "tcpip.stack_direct.Stackv4v6",
    stackv4v6,
    [network, ethernet, arpv4, ipv4v6],
    packages=[tcpip_package("stack-direct", "icmpv4", "udp", "tcp")],
    slots=["tcp_keepalive"],
)


def direct_stackv4v6(
    ctx: BuildContext, net: Node, eth: Node, arp: Node, ip: Node, *, tcp_keepalive: Any = None
) -> Node:
    return ctx.apply(direct_stackv4v6_conf, [net, eth, arp, ip], {"tcp_keepalive": tcp_keepalive})


def _connect_happy_eyeballs(
    modname: str, _random: str, _mclock: str, stack: str, *, params: Sequence[LabeledArg]
) -> str:
    return connect_call(modname, [stack], params)


happy_eyeballs_conf = register(
    "happy_eyeballs",
    "happy_eyeballs_mirage.HappyEyeballs",
    happy_eyeballs,
    [random, mclock, stackv4v6],
    packages=[package("happy-eyeballs-mirage")],
    slots=[
        "aaaa_timeout",
        "connect_delay",
        "connect_timeout",
        "resolve_timeout",
        "resolve_retries",
        "timer_interval",
    ],
    connect=_connect_happy_eyeballs,
)


def generic_happy_eyeballs(
    ctx: BuildContext,
    stack: Node,
    *,
    random: Optional[Node] = None,
    clock: Optional[Node] = None,
    **timeouts: Any,
) -> Node:
    return ctx.apply(
        happy_eyeballs_conf,
        [random or default_random(ctx), clock or default_monotonic_clock(ctx), stack],
        timeouts,
    )


dns_client_conf = register(
    "dns_client",
    "dns_client_mirage.DnsClient",
    dns_client,
    [stackv4v6, happy_eyeballs],
    packages=[package("dns-client-mirage")],
    slots=["cache_size", "edns", "nameservers", "timeout"],
)


def generic_dns_client(ctx: BuildContext, stack: Node, he: Node, **options: Any) -> Node:
    return ctx.apply(dns_client_conf, [stack, he], options)
