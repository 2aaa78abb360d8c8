# src/stackweave/core/__init__.py
"""
Composition core.

  - types: capability tags, versions, package requirements
  - descriptor: device descriptors and their registration checks
  - params: optional-parameter slot records, threading, arity check
  - node: nodes, graphs and the per-run build context (apply / root)
  - packages: whole-graph version-constraint aggregation
  - emitter: dependency-ordered binding emission
  - codegen: rendering of an emitted stack into module text
  - pipeline: aggregate-then-emit entry point
"""

from __future__ import annotations

from stackweave.core.descriptor import DeviceDescriptor, connect_call, register
from stackweave.core.emitter import Binding, EmittedStack, emit
from stackweave.core.errors import (
    ArityMismatch,
    CompositionError,
    MalformedDescriptor,
    ManifestError,
    RuntimeArgConflict,
    TagMismatch,
    UnknownParameter,
    UnsatisfiableConstraint,
)
from stackweave.core.node import BuildContext, Graph, Node
from stackweave.core.packages import MergedPackage, merge_constraints
from stackweave.core.params import ABSENT, LabeledArg, RuntimeArg
from stackweave.core.pipeline import BuildOutput, build, packages_json
from stackweave.core.types import CapabilityTag, Package, package, typ

__all__ = [
    "ABSENT",
    "ArityMismatch",
    "Binding",
    "BuildContext",
    "BuildOutput",
    "CapabilityTag",
    "CompositionError",
    "DeviceDescriptor",
    "EmittedStack",
    "Graph",
    "LabeledArg",
    "MalformedDescriptor",
    "ManifestError",
    "MergedPackage",
    "Node",
    "Package",
    "RuntimeArg",
    "RuntimeArgConflict",
    "TagMismatch",
    "UnknownParameter",
    "UnsatisfiableConstraint",
    "build",
    "connect_call",
    "emit",
    "merge_constraints",
    "package",
    "packages_json",
    "register",
    "typ",
]
