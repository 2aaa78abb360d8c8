# src/stackweave/core/pipeline.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from stackweave.core.emitter import EmittedStack, emit
from stackweave.core.node import Graph
from stackweave.core.packages import MergedPackage, merge_constraints

Json = Dict[str, Any]


@dataclass(frozen=True)
class BuildOutput:
    packages: Dict[str, MergedPackage]
    stack: EmittedStack

    @property
    def statements(self) -> Tuple[str, ...]:
        return self.stack.statements

    @property
    def root(self) -> str:
        return self.stack.root


def build(graph: Graph) -> BuildOutput:
    """Aggregate constraints for the whole graph, then emit.

    Emission only starts once every package range has been merged and checked.
    """
    packages = merge_constraints(graph.nodes())
    stack = emit(graph)
    return BuildOutput(packages=packages, stack=stack)


def packages_json(out: BuildOutput) -> str:
    doc: Json = {
        "packages": [p.to_json() for p in out.packages.values()],
        "root": out.root,
        "runtime_args": [{"key": a.full_key, "default": a.default} for a in out.stack.runtime_args],
    }
    return json.dumps(doc, indent=2, sort_keys=True) + "\n"
