# src/stackweave/core/emitter.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from stackweave.build_logging import log_event
from stackweave.core.errors import RuntimeArgConflict
from stackweave.core.node import Graph, Node
from stackweave.core.params import LabeledArg, RuntimeArg, check_arity, runtime_args, thread_params

_LOG = logging.getLogger("stackweave.core")


class EmitState(str, Enum):
    UNVISITED = "UNVISITED"
    EMITTED = "EMITTED"


@dataclass(frozen=True)
class Binding:
    ident: str
    expr: str

    def to_source(self) -> str:
        return f"{self.ident} = {self.expr}"


@dataclass(frozen=True)
class EmittedStack:
    bindings: Tuple[Binding, ...]
    root: str
    runtime_args: Tuple[RuntimeArg, ...]
    imports: Tuple[str, ...] = ()

    @property
    def statements(self) -> Tuple[str, ...]:
        return tuple(b.to_source() for b in self.bindings)


def flatten_args(node: Node) -> List[object]:
    """Dependency identifiers followed by present labeled parameters."""
    out: List[object] = [d.ident for d in node.deps]
    out.extend(thread_params(node.params))
    return out


def invoke_connect(node: Node, flat: Sequence[object]) -> str:
    """Split `flat` back into dependencies and labels and call the device's connect.

    The count is checked against what was declared and supplied at apply time,
    independently of how `flat` was produced.
    """
    d = node.descriptor
    expected = d.arity + node.params.supplied
    check_arity(d.name, expected, len(flat))

    deps = [str(x) for x in flat[: d.arity]]
    labels = list(flat[d.arity :])
    for x in labels:
        if not isinstance(x, LabeledArg):
            raise TypeError(f"{d.name}: expected a labeled parameter, got {x!r}")
    return d.connect(d.module, *deps, params=tuple(labels))


def emit_node(node: Node) -> Binding:
    return Binding(ident=node.ident, expr=invoke_connect(node, flatten_args(node)))


def import_path(module: str) -> str:
    """`tcpip.ipv6.Ipv6` -> `tcpip.ipv6`; a bare module name is imported as is."""
    return module.rsplit(".", 1)[0] if "." in module else module


def emit(graph: Graph) -> EmittedStack:
    state: Dict[int, EmitState] = {}
    bindings: List[Binding] = []
    runtime: Dict[str, RuntimeArg] = {}
    imports: set[str] = set()

    for n in graph.nodes():
        if state.get(id(n), EmitState.UNVISITED) is EmitState.EMITTED:
            continue
        for dep in n.deps:
            if state.get(id(dep)) is not EmitState.EMITTED:
                raise RuntimeError(f"{n.ident}: dependency {dep.ident} not emitted yet")
        bindings.append(emit_node(n))
        imports.add(import_path(n.descriptor.module))
        for arg in runtime_args(n.params):
            seen = runtime.setdefault(arg.full_key, arg)
            if seen.default != arg.default:
                raise RuntimeArgConflict.of(arg.full_key, seen.default, arg.default)
        state[id(n)] = EmitState.EMITTED

    stack = EmittedStack(
        bindings=tuple(bindings),
        root=graph.root.ident,
        runtime_args=tuple(runtime.values()),
        imports=tuple(sorted(imports)),
    )
    log_event(_LOG, "stack_emitted", root=stack.root, statements=len(bindings))
    return stack
