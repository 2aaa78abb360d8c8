# src/stackweave/core/params.py
"""Optional-parameter threading.

A descriptor declares its optional slots in a fixed order. At application time
the caller supplies a mapping of slot name -> value; names that are missing are
absent and the implementation's built-in default applies (a value of None is treated the
same way).

The selection is frozen into a fixed-size ``SlotRecord`` (one entry per declared
slot). Threading walks the record in declaration order and yields the present
``(label, value)`` pairs with absent slots skipped. ``check_arity`` is the
independent second check run on the flattened argument list right before
emission.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple

from stackweave.core.errors import ArityMismatch, UnknownParameter


class _Absent:
    _inst: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._inst is None:
            cls._inst = super().__new__(cls)
        return cls._inst

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


@dataclass(frozen=True, slots=True)
class RuntimeArg:
    """A runtime-configurable value.

    Generated code reads it as `runtime_args[<full key>]` from the mapping passed
    to the entry function; the module's RUNTIME_ARGS dict has the same keys.

    Parsing the value (CLI flag, environment, key-value store) belongs to the
    runtime-configuration layer; here it is only a name with an optional default.
    """

    key: str
    group: Optional[str] = None
    default: Optional[str] = None

    @property
    def full_key(self) -> str:
        return f"{self.group}-{self.key}" if self.group else self.key

    def to_source(self) -> str:
        return f"runtime_args[{self.full_key!r}]"


@dataclass(frozen=True, slots=True)
class LabeledArg:
    label: str
    value: Any

    def to_source(self) -> str:
        return f"{self.label}={render_value(self.value)}"


def render_value(value: Any) -> str:
    if isinstance(value, RuntimeArg):
        return value.to_source()
    return repr(value)


@dataclass(frozen=True)
class SlotRecord:
    """One entry per declared slot, in declaration order; ABSENT marks a gap."""

    names: Tuple[str, ...]
    values: Tuple[Any, ...]

    @property
    def supplied(self) -> int:
        return sum(1 for v in self.values if v is not ABSENT)

    def get(self, name: str) -> Any:
        return self.values[self.names.index(name)]


def make_slot_record(
    node_name: str,
    slots: Sequence[str],
    selection: Optional[Mapping[str, Any]],
) -> SlotRecord:
    sel = dict(selection or {})
    unknown = sorted(k for k in sel if k not in slots)
    if unknown:
        raise UnknownParameter.of(node_name, unknown, list(slots))
    # None and ABSENT both mean "use the built-in default".
    values = tuple(ABSENT if sel.get(name) is None else sel[name] for name in slots)
    return SlotRecord(names=tuple(slots), values=values)


def thread_params(record: SlotRecord) -> Tuple[LabeledArg, ...]:
    return tuple(
        LabeledArg(label=name, value=value)
        for name, value in zip(record.names, record.values)
        if value is not ABSENT
    )


def check_arity(node_name: str, expected: int, observed: int) -> None:
    if expected != observed:
        raise ArityMismatch.of(node_name, expected, observed)


def runtime_args(record: SlotRecord) -> Tuple[RuntimeArg, ...]:
    return tuple(v for v in record.values if isinstance(v, RuntimeArg))
