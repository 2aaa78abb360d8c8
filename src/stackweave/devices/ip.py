# src/stackweave/devices/ip.py
"""IPv4, IPv6 and dual-stack devices.

Static IPv4, IPv6 and the dual-stack combiner expose their configuration as
optional runtime arguments; DHCP and QubesDB variants take none. All tcpip
layers share one version window and differ only in sublibrary.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from stackweave.core import BuildContext, LabeledArg, Node, Package, RuntimeArg, connect_call, package, register, typ
from stackweave.devices.arp import arpv4
from stackweave.devices.ethernet import ethernet
from stackweave.devices.misc import (
    default_monotonic_clock,
    default_qubesdb,
    default_random,
    default_time,
    mclock,
    network,
    qubesdb,
    random,
    time,
)

ipv4 = typ("ipv4")
ipv6 = typ("ipv6")
ipv4v6 = typ("ipv4v6")

TCPIP_MIN = "7.0.0"
TCPIP_MAX = "9.0.0"


def tcpip_package(*sublibs: str) -> Package:
    return package("tcpip", min=TCPIP_MIN, max=TCPIP_MAX, sublibs=list(sublibs))


@dataclass(frozen=True)
class Ipv4Config:
    network: ipaddress.IPv4Interface
    gateway: Optional[ipaddress.IPv4Address] = None


@dataclass(frozen=True)
class Ipv6Config:
    network: ipaddress.IPv6Interface
    gateway: Optional[ipaddress.IPv6Address] = None


DEFAULT_IPV4_NETWORK = "10.0.0.2/24"


def _opt_str(v: Any) -> Optional[str]:
    return None if v is None else str(v)


# ---------------------------------------------------------------------------
# IPv4


def _connect_static_ipv4(
    modname: str, _random: str, _mclock: str, etif: str, arp: str, *, params: Sequence[LabeledArg]
) -> str:
    return connect_call(modname, [etif, arp], params)


static_ipv4_conf = register(
    "static_ipv4",
    "tcpip.static_ipv4.StaticIpv4",
    ipv4,
    [random, mclock, ethernet, arpv4],
    packages=[tcpip_package("ipv4")],
    slots=["no_init", "gateway", "cidr"],
    connect=_connect_static_ipv4,
)


def _connect_dhcp_ipv4(
    modname: str, _random: str, _mclock: str, _time: str, net: str, etif: str, arp: str, *, params: Sequence[LabeledArg]
) -> str:
    return connect_call(modname, [net, etif, arp], params)


dhcp_ipv4_conf = register(
    "dhcp_ipv4",
    "charrua_client.DhcpIpv4",
    ipv4,
    [random, mclock, time, network, ethernet, arpv4],
    packages=[package("charrua-client", min="1.3.0", max="2.0.0", sublibs=["mirage"])],
    connect=_connect_dhcp_ipv4,
)


def _connect_qubes_ipv4(
    modname: str, db: str, _random: str, _mclock: str, etif: str, arp: str, *, params: Sequence[LabeledArg]
) -> str:
    return connect_call(modname, [db, etif, arp], params)


qubes_ipv4_conf = register(
    "qubes_ipv4",
    "qubes_ipv4.QubesdbIpv4",
    ipv4,
    [qubesdb, random, mclock, ethernet, arpv4],
    packages=[package("mirage-qubes-ipv4", min="0.9.0", max="0.12.0")],
    connect=_connect_qubes_ipv4,
)


def keyed_ipv4(
    ctx: BuildContext,
    etif: Node,
    arp: Node,
    *,
    cidr: Any,
    gateway: Any = None,
    no_init: Any = None,
    random: Optional[Node] = None,
    clock: Optional[Node] = None,
) -> Node:
    return ctx.apply(
        static_ipv4_conf,
        [random or default_random(ctx), clock or default_monotonic_clock(ctx), etif, arp],
        {"no_init": no_init, "gateway": gateway, "cidr": cidr},
    )


def create_ipv4(
    ctx: BuildContext,
    etif: Node,
    arp: Node,
    *,
    group: Optional[str] = None,
    config: Optional[Ipv4Config] = None,
    no_init: Any = None,
    random: Optional[Node] = None,
    clock: Optional[Node] = None,
) -> Node:
    """Static IPv4 whose address and gateway are runtime arguments.

    The configured network and gateway only become the defaults of those
    arguments; they are recorded, not hard-wired into the call.
    """
    if config is None:
        config = Ipv4Config(network=ipaddress.IPv4Interface(DEFAULT_IPV4_NETWORK))
    return keyed_ipv4(
        ctx,
        etif,
        arp,
        cidr=RuntimeArg("ipv4", group=group, default=str(config.network)),
        gateway=RuntimeArg("ipv4-gateway", group=group, default=_opt_str(config.gateway)),
        no_init=no_init,
        random=random,
        clock=clock,
    )


def ipv4_of_dhcp(
    ctx: BuildContext,
    net: Node,
    etif: Node,
    arp: Node,
    *,
    random: Optional[Node] = None,
    clock: Optional[Node] = None,
    time: Optional[Node] = None,
) -> Node:
    return ctx.apply(
        dhcp_ipv4_conf,
        [
            random or default_random(ctx),
            clock or default_monotonic_clock(ctx),
            time or default_time(ctx),
            net,
            etif,
            arp,
        ],
    )


def ipv4_qubes(
    ctx: BuildContext,
    etif: Node,
    arp: Node,
    *,
    db: Optional[Node] = None,
    random: Optional[Node] = None,
    clock: Optional[Node] = None,
) -> Node:
    return ctx.apply(
        qubes_ipv4_conf,
        [db or default_qubesdb(ctx), random or default_random(ctx), clock or default_monotonic_clock(ctx), etif, arp],
    )


# ---------------------------------------------------------------------------
# IPv6


def _connect_ipv6(
    modname: str, netif: str, etif: str, _random: str, _time: str, _mclock: str, *, params: Sequence[LabeledArg]
) -> str:
    return connect_call(modname, [netif, etif], params)


ipv6_conf = register(
    "ipv6",
    "tcpip.ipv6.Ipv6",
    ipv6,
    [network, ethernet, random, time, mclock],
    packages=[tcpip_package("ipv6")],
    slots=["cidr", "gateway", "handle_ra", "no_init"],
    connect=_connect_ipv6,
)


def create_ipv6(
    ctx: BuildContext,
    netif: Node,
    etif: Node,
    *,
    group: Optional[str] = None,
    config: Optional[Ipv6Config] = None,
    handle_ra: Any = None,
    no_init: Any = None,
    random: Optional[Node] = None,
    time: Optional[Node] = None,
    clock: Optional[Node] = None,
) -> Node:
    """IPv6; without a config the address defaults to router advertisements.

    Accepting router advertisements is itself a runtime argument unless
    `handle_ra` is given.
    """
    network_default = str(config.network) if config is not None else None
    gateway_default = _opt_str(config.gateway) if config is not None else None
    cidr = RuntimeArg("ipv6", group=group, default=network_default)
    gateway = RuntimeArg("ipv6-gateway", group=group, default=gateway_default)
    if handle_ra is None:
        handle_ra = RuntimeArg("accept-router-advertisements", group=group)
    return ctx.apply(
        ipv6_conf,
        [
            netif,
            etif,
            random or default_random(ctx),
            time or default_time(ctx),
            clock or default_monotonic_clock(ctx),
        ],
        {"cidr": cidr, "gateway": gateway, "handle_ra": handle_ra, "no_init": no_init},
    )


# ---------------------------------------------------------------------------
# Dual stack

ipv4v6_conf = register(
    "ipv4v6",
    "tcpip.stack_direct.Ipv4v6",
    ipv4v6,
    [ipv4, ipv6],
    packages=[tcpip_package("stack-direct")],
    slots=["ipv4_only", "ipv6_only"],
)


def keyed_ipv4v6(ctx: BuildContext, v4: Node, v6: Node, *, ipv4_only: Any = None, ipv6_only: Any = None) -> Node:
    return ctx.apply(ipv4v6_conf, [v4, v6], {"ipv4_only": ipv4_only, "ipv6_only": ipv6_only})


def create_ipv4v6(ctx: BuildContext, v4: Node, v6: Node, *, group: Optional[str] = None) -> Node:
    return keyed_ipv4v6(
        ctx,
        v4,
        v6,
        ipv4_only=RuntimeArg("ipv4-only", group=group),
        ipv6_only=RuntimeArg("ipv6-only", group=group),
    )
