# src/stackweave/devices/ethernet.py
from __future__ import annotations

from stackweave.core import BuildContext, Node, package, register, typ
from stackweave.devices.misc import network

ethernet = typ("ethernet")

etif_conf = register(
    "ethernet",
    "ethernet.Ethernet",
    ethernet,
    [network],
    packages=[package("ethernet", min="3.0.0", max="4.0.0")],
)


def etif(ctx: BuildContext, net: Node) -> Node:
    return ctx.apply(etif_conf, [net])
