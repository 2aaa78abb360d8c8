# src/stackweave/core/node.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from stackweave.build_logging import log_event
from stackweave.core.descriptor import DeviceDescriptor
from stackweave.core.errors import ArityMismatch, TagMismatch
from stackweave.core.params import SlotRecord, make_slot_record, thread_params
from stackweave.core.types import CapabilityTag

_LOG = logging.getLogger("stackweave.core")


@dataclass(frozen=True, eq=False)
class Node:
    """A fully applied device. Built only by BuildContext.apply.

    Identity is the object itself; two applications of the same descriptor to
    the same dependencies are two distinct nodes with distinct identifiers.
    """

    descriptor: DeviceDescriptor
    deps: Tuple["Node", ...]
    params: SlotRecord
    ident: str

    @property
    def output(self) -> CapabilityTag:
        return self.descriptor.output

    @property
    def name(self) -> str:
        return self.descriptor.name

    def __repr__(self) -> str:
        return f"<node {self.ident} {self.descriptor.module}>"


@dataclass(frozen=True)
class Graph:
    root: Node

    def nodes(self) -> List[Node]:
        """Every reachable node once, dependencies before dependents.

        Depth-first post-order, walked iteratively (no recursion limit on depth).
        """
        out: List[Node] = []
        seen: set[int] = {id(self.root)}
        stack: List[Tuple[Node, int]] = [(self.root, 0)]
        while stack:
            n, i = stack[-1]
            if i < len(n.deps):
                stack[-1] = (n, i + 1)
                d = n.deps[i]
                if id(d) not in seen:
                    seen.add(id(d))
                    stack.append((d, 0))
                continue
            stack.pop()
            out.append(n)
        return out

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes())

    def __len__(self) -> int:
        return len(self.nodes())


@dataclass
class BuildContext:
    """State for one configuration run: the generated-identifier counter.

    Create a fresh context per run; identifiers restart at 1.
    """

    counter: int = 0
    log_applies: bool = True
    _defaults: Dict[str, Node] = field(default_factory=dict, repr=False)

    def fresh_ident(self, prefix: str) -> str:
        self.counter += 1
        return f"{prefix}_{self.counter}"

    def apply(
        self,
        descriptor: DeviceDescriptor,
        deps: Sequence[Node] = (),
        params: Optional[Mapping[str, Any]] = None,
    ) -> Node:
        ds = tuple(deps)
        if len(ds) != descriptor.arity:
            raise ArityMismatch.of(descriptor.name, descriptor.arity, len(ds))
        for i, (want, got) in enumerate(zip(descriptor.inputs, ds)):
            if not isinstance(got, Node):
                raise TagMismatch.of(descriptor.name, i, str(want), type(got).__name__)
            if got.output != want:
                raise TagMismatch.of(descriptor.name, i, str(want), str(got.output))

        record = make_slot_record(descriptor.name, descriptor.slots, params)
        node = Node(
            descriptor=descriptor,
            deps=ds,
            params=record,
            ident=self.fresh_ident(descriptor.name),
        )
        if self.log_applies:
            log_event(
                _LOG,
                "node_applied",
                node=node.ident,
                module=descriptor.module,
                deps=[d.ident for d in ds],
                params=[p.label for p in thread_params(record)],
            )
        return node

    def default(self, descriptor: DeviceDescriptor) -> Node:
        """Apply a dependency-free descriptor once per run and reuse the node."""
        node = self._defaults.get(descriptor.name)
        if node is None or node.descriptor is not descriptor:
            node = self.apply(descriptor)
            self._defaults[descriptor.name] = node
        return node

    def root(self, node: Node) -> Graph:
        if not isinstance(node, Node):
            raise TypeError(f"root expects a Node, got {type(node).__name__}")
        return Graph(root=node)

