# src/stackweave/devices/misc.py
"""Leaf devices every network layer pulls in: network interface, entropy,
clocks, time, and the QubesDB handle."""

from __future__ import annotations

from typing import Optional, Sequence

from stackweave.core import BuildContext, LabeledArg, Node, RuntimeArg, connect_call, package, register, typ
from stackweave.core.params import render_value

network = typ("network")
random = typ("random")
mclock = typ("mclock")
time = typ("time")
qubesdb = typ("qubesdb")


def _connect_netif(modname: str, *, params: Sequence[LabeledArg]) -> str:
    # interface name goes positionally
    return connect_call(modname, [render_value(p.value) for p in params])


netif_conf = register(
    "netif",
    "mirage_net.Netif",
    network,
    packages=[package("mirage-net")],
    slots=["interface"],
    connect=_connect_netif,
)

default_random_conf = register(
    "rng",
    "mirage_crypto_rng.Rng",
    random,
    packages=[package("mirage-crypto-rng", sublibs=["mirage"])],
)

default_mclock_conf = register(
    "mclock",
    "mirage_mtime.Mclock",
    mclock,
    packages=[package("mirage-mtime")],
)

default_time_conf = register(
    "time",
    "mirage_sleep.Time",
    time,
    packages=[package("mirage-sleep")],
)

qubesdb_conf = register(
    "qubesdb",
    "qubes.DB",
    qubesdb,
    packages=[package("mirage-qubes")],
)


def netif(ctx: BuildContext, name: str = "service", *, runtime: bool = False, group: Optional[str] = None) -> Node:
    """A network interface; with runtime=True its name is read from the runtime args."""
    value = RuntimeArg("interface", group=group) if runtime else name
    return ctx.apply(netif_conf, params={"interface": value})


def default_random(ctx: BuildContext) -> Node:
    return ctx.default(default_random_conf)


def default_monotonic_clock(ctx: BuildContext) -> Node:
    return ctx.default(default_mclock_conf)


def default_time(ctx: BuildContext) -> Node:
    return ctx.default(default_time_conf)


def default_qubesdb(ctx: BuildContext) -> Node:
    return ctx.default(qubesdb_conf)
