# tests/test_smoke.py
from __future__ import annotations

from pathlib import Path

from stackweave.devices import DEVICES, get_device
from stackweave.manifest import load_manifest


def test_imports_smoke() -> None:
    # If this test runs, basic imports and pythonpath are working.
    assert True


def test_device_library_loads() -> None:
    assert DEVICES, "device library should not be empty"
    for name, desc in DEVICES.items():
        assert desc.name == name
        assert get_device(name) is desc


def test_shipped_manifests_parse() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    paths = sorted((repo_root / "specs" / "stacks").glob("*.yaml"))
    assert paths, "expected at least one shipped manifest"
    for p in paths:
        m = load_manifest(p)
        assert m.nodes
