# src/stackweave/devices/arp.py
from __future__ import annotations

from stackweave.core import BuildContext, Node, package, register, typ
from stackweave.devices.ethernet import ethernet

arpv4 = typ("arpv4")

arp_conf = register(
    "arp",
    "arp.Arp",
    arpv4,
    [ethernet],
    packages=[package("arp", min="3.0.0", max="4.0.0", sublibs=["mirage"])],
)


def arp(ctx: BuildContext, eth: Node) -> Node:
    return ctx.apply(arp_conf, [eth])
