# src/stackweave/config.py
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

Json = Dict[str, Any]


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


def _as_bool(v: Any, default: bool) -> bool:
    if v is None:
        return bool(default)
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return bool(default)


@dataclass(frozen=True)
class BuildConfig:
    manifest_path: str
    main_out_path: str
    packages_out_path: str

    # Name of the generated function that builds the stack.
    entry_name: str

    # Record the generating command line in the generated header.
    record_argv: bool

    log_level: str


_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_build_config(cfg: BuildConfig) -> None:
    """Fail-fast validation: a bad config must stop the run before anything is written."""
    for name, p in (
        ("manifest_path", cfg.manifest_path),
        ("main_out_path", cfg.main_out_path),
        ("packages_out_path", cfg.packages_out_path),
    ):
        if not isinstance(p, str) or not p.strip():
            raise ValueError(f"{name} must be a non-empty string")

    if Path(cfg.main_out_path).resolve() == Path(cfg.packages_out_path).resolve():
        raise ValueError("main_out_path and packages_out_path must differ")

    if not cfg.entry_name.isidentifier():
        raise ValueError(f"entry_name must be a Python identifier; got: {cfg.entry_name!r}")

    level = str(cfg.log_level or "").strip().upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}; got: {cfg.log_level!r}")

    if not Path(cfg.manifest_path).is_file():
        raise ValueError(f"manifest_path does not exist or is not a file: {cfg.manifest_path!r}")


def default_build_config() -> BuildConfig:
    return BuildConfig(
        manifest_path="./specs/stacks/dual_stack.yaml",
        main_out_path="./generated/main_stack.py",
        packages_out_path="./generated/packages.json",
        entry_name="connect",
        record_argv=False,
        log_level="INFO",
    )


def read_build_config_file(path: str) -> BuildConfig:
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("build config must be a JSON object")

    d = default_build_config()

    cfg = BuildConfig(
        manifest_path=_as_str(raw.get("manifest_path"), d.manifest_path),
        main_out_path=_as_str(raw.get("main_out_path"), d.main_out_path),
        packages_out_path=_as_str(raw.get("packages_out_path"), d.packages_out_path),
        entry_name=_as_str(raw.get("entry_name"), d.entry_name),
        record_argv=_as_bool(raw.get("record_argv"), d.record_argv),
        log_level=_as_str(raw.get("log_level"), d.log_level),
    )

    validate_build_config(cfg)
    return cfg


def load_build_config(*, config_path: Optional[str] = None, overrides: Optional[Json] = None) -> BuildConfig:
    """Config file (argument or STACKWEAVE_BUILD_CONFIG_PATH) or defaults, then overrides."""
    p = config_path or os.environ.get("STACKWEAVE_BUILD_CONFIG_PATH")
    if p:
        base = read_build_config_file(p)
    else:
        base = default_build_config()

    env_level = os.environ.get("STACKWEAVE_LOG_LEVEL")
    fields: Json = asdict(base)
    if env_level:
        fields["log_level"] = env_level
    for k, v in (overrides or {}).items():
        if v is not None and k in fields:
            fields[k] = v

    cfg = BuildConfig(**fields)
    validate_build_config(cfg)
    return cfg
