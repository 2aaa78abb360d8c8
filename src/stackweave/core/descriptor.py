# src/stackweave/core/descriptor.py
from __future__ import annotations

import inspect
import keyword
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from stackweave.core.errors import MalformedDescriptor
from stackweave.core.params import LabeledArg
from stackweave.core.types import CapabilityTag, Package

# connect(modname, dep_1, ..., dep_n, *, params) -> call expression
ConnectFn = Callable[..., str]

_NAME_RE = re.compile(r"^[a-z_][a-z0-9_]*$")
_MODULE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def connect_call(modname: str, positional: Sequence[str], params: Sequence[LabeledArg] = ()) -> str:
    args = [str(p) for p in positional] + [p.to_source() for p in params]
    return f"{modname}.connect({', '.join(args)})"


class _DefaultConnect:
    """Passes every dependency positionally and every present label by keyword."""

    def __init__(self, arity: int) -> None:
        self.arity = int(arity)

    def __call__(self, modname: str, *deps: str, params: Sequence[LabeledArg] = ()) -> str:
        return connect_call(modname, deps, params)


@dataclass(frozen=True)
class DeviceDescriptor:
    name: str
    module: str
    output: CapabilityTag
    inputs: Tuple[CapabilityTag, ...]
    packages: Tuple[Package, ...]
    slots: Tuple[str, ...]
    connect: ConnectFn

    @property
    def arity(self) -> int:
        return len(self.inputs)

    def __repr__(self) -> str:
        ins = " -> ".join(str(t) for t in (*self.inputs, self.output))
        return f"<device {self.name} {self.module}: {ins}>"


def _connect_arity(fn: ConnectFn) -> Optional[int]:
    """Number of dependency identifiers `fn` takes, or None if it is not fixed."""
    declared = getattr(fn, "arity", None)
    if declared is not None:
        # bool is an int subclass; arity=True is not a count
        return declared if type(declared) is int and declared >= 0 else None
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    positional = 0
    has_params = False
    for p in sig.parameters.values():
        if p.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
        if p.name == "params" or p.kind is inspect.Parameter.VAR_KEYWORD:
            has_params = True
    if not has_params or positional == 0:
        return None
    # first positional is the module name
    return positional - 1


def _check_packages(name: str, packages: Sequence[Package]) -> None:
    for pkg in packages:
        if not isinstance(pkg, Package) or not pkg.name.strip():
            raise MalformedDescriptor.of(name, "package entries must be named Package values")
        try:
            lo, hi = pkg.lower(), pkg.upper()
        except ValueError as e:
            raise MalformedDescriptor.of(name, str(e), package=pkg.name) from e
        if lo is not None and hi is not None and not (lo.key() < hi.key()):
            raise MalformedDescriptor.of(
                name,
                f"package {pkg.name}: min must be lower than max, got {pkg.range_str()}",
                package=pkg.name,
            )


def _check_slots(name: str, slots: Sequence[str]) -> None:
    seen: set[str] = set()
    for s in slots:
        if not isinstance(s, str) or not s.isidentifier() or keyword.iskeyword(s):
            raise MalformedDescriptor.of(name, f"invalid optional parameter name: {s!r}")
        if s == "params":
            raise MalformedDescriptor.of(name, "optional parameter name 'params' is reserved")
        if s in seen:
            raise MalformedDescriptor.of(name, f"duplicate optional parameter: {s}")
        seen.add(s)


def register(
    name: str,
    module: str,
    output: CapabilityTag,
    inputs: Sequence[CapabilityTag] = (),
    *,
    packages: Sequence[Package] = (),
    slots: Sequence[str] = (),
    connect: Optional[ConnectFn] = None,
) -> DeviceDescriptor:
    """Define a device. Every self-consistency check happens here, not at apply time."""
    if not isinstance(name, str) or not _NAME_RE.match(name):
        raise MalformedDescriptor.of(str(name), "descriptor name must be a lowercase identifier")
    if not isinstance(module, str) or not _MODULE_RE.match(module):
        raise MalformedDescriptor.of(name, f"invalid module path: {module!r}")
    if not isinstance(output, CapabilityTag):
        raise MalformedDescriptor.of(name, "output must be a CapabilityTag")
    ins = tuple(inputs)
    for i, t in enumerate(ins):
        if not isinstance(t, CapabilityTag):
            raise MalformedDescriptor.of(name, f"input #{i} must be a CapabilityTag")

    _check_packages(name, packages)
    _check_slots(name, slots)

    fn = connect if connect is not None else _DefaultConnect(len(ins))
    arity = _connect_arity(fn)
    if arity is None:
        raise MalformedDescriptor.of(
            name,
            "connect must take the module name, one positional argument per input and a 'params' keyword",
        )
    if arity != len(ins):
        raise MalformedDescriptor.of(
            name,
            f"connect takes {arity} dependency argument(s) but {len(ins)} input(s) are declared",
            expected=len(ins),
            observed=arity,
        )

    return DeviceDescriptor(
        name=name,
        module=module,
        output=output,
        inputs=ins,
        packages=tuple(packages),
        slots=tuple(slots),
        connect=fn,
    )
