# src/stackweave/core/codegen.py
"""Basic helpers to turn an emitted stack into module source text."""

from __future__ import annotations

import shlex
from typing import Optional, Sequence

from stackweave.core.emitter import EmittedStack

INDENT = "    "


def generated_header(argv: Optional[Sequence[str]] = None) -> str:
    lines = ["# Generated by stackweave. Do not edit."]
    if argv:
        lines.append(f"# Command: {shlex.join(str(a) for a in argv)}")
    return "\n".join(lines) + "\n"


def render_main(stack: EmittedStack, *, argv: Optional[Sequence[str]] = None, entry: str = "connect") -> str:
    """Render a main module whose `entry(runtime_args)` builds the stack and returns its handle.

    `runtime_args` is a mapping with the keys of RUNTIME_ARGS; `entry(RUNTIME_ARGS)`
    runs the stack with the recorded defaults.
    """
    out = [generated_header(argv)]
    for mod in stack.imports:
        out.append(f"import {mod}")
    out.append("")
    if stack.runtime_args:
        out.append("RUNTIME_ARGS = {")
        for arg in stack.runtime_args:
            out.append(f"{INDENT}{arg.full_key!r}: {arg.default!r},")
        out.append("}")
    else:
        out.append("RUNTIME_ARGS = {}")
    out.append("")
    out.append("")
    out.append(f"def {entry}(runtime_args):")
    for stmt in stack.statements:
        out.append(f"{INDENT}{stmt}")
    out.append(f"{INDENT}return {stack.root}")
    return "\n".join(out) + "\n"
