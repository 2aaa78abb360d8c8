# src/stackweave/devices/__init__.py
"""
Device library

  - misc: network interface, entropy, clocks, time, QubesDB
  - ethernet: link layer
  - arp: IPv4 address resolution
  - ip: static / DHCP / QubesDB IPv4, IPv6, dual-stack IPv4V6
  - stack: direct TCP/IP stack, happy-eyeballs, DNS client
  - mimic: connection helper over happy-eyeballs

Each module only declares descriptors and small builder functions; the core
never looks past a descriptor's tags and package metadata.
"""

from __future__ import annotations

from typing import Dict, Iterable

from stackweave.core import DeviceDescriptor, MalformedDescriptor
from stackweave.devices import arp, ethernet, ip, mimic, misc, stack


def _index(descriptors: Iterable[DeviceDescriptor]) -> Dict[str, DeviceDescriptor]:
    out: Dict[str, DeviceDescriptor] = {}
    for d in descriptors:
        if d.name in out:
            raise MalformedDescriptor.of(d.name, "duplicate device name in registry")
        out[d.name] = d
    return out


DEVICES: Dict[str, DeviceDescriptor] = _index(
    [
        misc.netif_conf,
        misc.default_random_conf,
        misc.default_mclock_conf,
        misc.default_time_conf,
        misc.qubesdb_conf,
        ethernet.etif_conf,
        arp.arp_conf,
        ip.static_ipv4_conf,
        ip.dhcp_ipv4_conf,
        ip.qubes_ipv4_conf,
        ip.ipv6_conf,
        ip.ipv4v6_conf,
        stack.direct_stackv4v6_conf,
        stack.happy_eyeballs_conf,
        stack.dns_client_conf,
        mimic.mimic_happy_eyeballs_conf,
    ]
)


def get_device(name: str) -> DeviceDescriptor | None:
    return DEVICES.get(str(name).strip())


__all__ = ["DEVICES", "get_device", "arp", "ethernet", "ip", "mimic", "misc", "stack"]
