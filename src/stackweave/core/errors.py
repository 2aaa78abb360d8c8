# src/stackweave/core/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CompositionError(Exception):
    """Canonical error type for descriptor, composition and build failures.

    Every subclass is fatal for the configuration run that raised it.
    """

    code: str
    reason: str
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


class MalformedDescriptor(CompositionError):
    @classmethod
    def of(cls, name: str, reason: str, **details: Any) -> "MalformedDescriptor":
        return cls("malformed_descriptor", reason, {"descriptor": name, **details})


class TagMismatch(CompositionError):
    @classmethod
    def of(cls, name: str, index: int, expected: str, actual: str) -> "TagMismatch":
        return cls(
            "tag_mismatch",
            f"{name}: dependency #{index} has capability {actual!r}, expected {expected!r}",
            {"node": name, "index": index, "expected": expected, "actual": actual},
        )


class ArityMismatch(CompositionError):
    @classmethod
    def of(cls, name: str, expected: int, observed: int) -> "ArityMismatch":
        return cls(
            "arity_mismatch",
            f"{name}: expected {expected} argument(s), got {observed}",
            {"node": name, "expected": expected, "observed": observed},
        )


class UnknownParameter(CompositionError):
    @classmethod
    def of(cls, name: str, unknown: list[str], declared: list[str]) -> "UnknownParameter":
        return cls(
            "unknown_parameter",
            f"{name}: unknown optional parameter(s) {unknown}",
            {"node": name, "unknown": unknown, "declared": declared},
        )


class UnsatisfiableConstraint(CompositionError):
    @classmethod
    def of(cls, package: str, lower: str, upper: str) -> "UnsatisfiableConstraint":
        return cls(
            "unsatisfiable_constraint",
            f"package {package}: {lower} and {upper} do not overlap",
            {"package": package, "ranges": [lower, upper]},
        )


class ManifestError(CompositionError):
    @classmethod
    def of(cls, where: str, reason: str) -> "ManifestError":
        return cls("manifest_invalid", reason, {"where": where})


class RuntimeArgConflict(CompositionError):
    @classmethod
    def of(cls, key: str, first: str | None, second: str | None) -> "RuntimeArgConflict":
        return cls(
            "runtime_arg_conflict",
            f"runtime argument {key!r} has conflicting defaults {first!r} and {second!r}",
            {"key": key, "defaults": [first, second]},
        )
