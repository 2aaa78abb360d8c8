# src/stackweave/manifest.py
"""YAML stack manifests.

A manifest is composition code written as data:

    version: 1
    name: dual-stack
    nodes:
      - id: net
        device: netif
        params: {interface: service}
      - id: eth
        device: ethernet
        deps: [net]
      ...
    root: stack

Nodes are applied in the listed order and `deps` may only name earlier ids, so a
manifest can never describe a cycle. A param value of the form
`{runtime: <key>, group: <g>, default: <d>}` becomes a runtime argument; any
other value is passed through as a literal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from stackweave.core import BuildContext, DeviceDescriptor, Graph, ManifestError, Node, RuntimeArg
from stackweave.devices import DEVICES

SUPPORTED_VERSIONS = {1}


class RuntimeArgSpec(BaseModel):
    runtime: str = Field(..., description="Runtime argument key, e.g. ipv4-gateway")
    group: Optional[str] = Field(default=None, description="Key prefix for multi-stack builds")
    default: Optional[str] = Field(default=None, description="Default recorded for the runtime layer")

    model_config = {"extra": "forbid"}


class NodeSpec(BaseModel):
    id: str = Field(..., min_length=1)
    device: str = Field(..., min_length=1)
    deps: List[str] = Field(default_factory=list)
    params: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}


class StackManifest(BaseModel):
    version: int = 1
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    nodes: List[NodeSpec]
    root: str

    # Unknown top-level keys are ignored (forward compatible)
    model_config = {"extra": "allow"}


def parse_manifest(data: Any, *, where: str = "<manifest>") -> StackManifest:
    if not isinstance(data, dict):
        raise ManifestError.of(where, "manifest root must be a mapping")
    try:
        m = StackManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError.of(where, f"invalid manifest: {e}") from e
    if m.version not in SUPPORTED_VERSIONS:
        raise ManifestError.of(where, f"unsupported manifest version: {m.version}")
    return m


def load_manifest(path: str | Path) -> StackManifest:
    p = Path(path)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ManifestError.of(str(p), f"failed to read YAML: {e}") from e
    return parse_manifest(data, where=str(p))


def _param_value(v: Any, where: str) -> Any:
    if isinstance(v, dict) and "runtime" in v:
        try:
            spec = RuntimeArgSpec.model_validate(v)
        except ValidationError as e:
            raise ManifestError.of(where, f"invalid runtime argument: {e}") from e
        return RuntimeArg(spec.runtime, group=spec.group, default=spec.default)
    return v


def compose(
    ctx: BuildContext,
    manifest: StackManifest,
    devices: Optional[Mapping[str, DeviceDescriptor]] = None,
) -> Graph:
    registry = DEVICES if devices is None else devices
    built: Dict[str, Node] = {}

    for i, spec in enumerate(manifest.nodes):
        where = f"nodes[{i}] ({spec.id})"
        if spec.id in built:
            raise ManifestError.of(where, f"duplicate node id: {spec.id}")
        desc = registry.get(spec.device)
        if desc is None:
            raise ManifestError.of(where, f"unknown device: {spec.device}")

        deps: List[Node] = []
        for dep_id in spec.deps:
            dep = built.get(dep_id)
            if dep is None:
                raise ManifestError.of(where, f"dependency {dep_id!r} is not defined before {spec.id!r}")
            deps.append(dep)

        params = {k: _param_value(v, where) for k, v in spec.params.items()}
        built[spec.id] = ctx.apply(desc, deps, params)

    root = built.get(manifest.root)
    if root is None:
        raise ManifestError.of("root", f"root {manifest.root!r} is not a node id")
    return ctx.root(root)
