# src/stackweave/devices/mimic.py
from __future__ import annotations

from typing import Sequence

from stackweave.core import BuildContext, LabeledArg, Node, connect_call, package, register, typ
from stackweave.devices.stack import dns_client, happy_eyeballs, stackv4v6

mimic = typ("mimic")


def _connect_mimic(modname: str, _stack: str, _dns: str, he: str, *, params: Sequence[LabeledArg]) -> str:
    return connect_call(modname, [he], params)


mimic_happy_eyeballs_conf = register(
    "mimic",
    "mimic_happy_eyeballs.Mimic",
    mimic,
    [stackv4v6, dns_client, happy_eyeballs],
    packages=[package("mimic-happy-eyeballs", min="0.0.5")],
    connect=_connect_mimic,
)


def mimic_happy_eyeballs(ctx: BuildContext, stack: Node, dns: Node, he: Node) -> Node:
    return ctx.apply(mimic_happy_eyeballs_conf, [stack, dns, he])
