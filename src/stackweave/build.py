# src/stackweave/build.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from stackweave.build_logging import log_event
from stackweave.config import BuildConfig
from stackweave.core import BuildContext, BuildOutput, build, packages_json
from stackweave.core.codegen import render_main
from stackweave.manifest import compose, load_manifest

_LOG = logging.getLogger("stackweave.build")


@dataclass(frozen=True)
class BuildResult:
    output: BuildOutput
    main_source: str
    packages_source: str


def build_manifest(cfg: BuildConfig, *, argv: Optional[Sequence[str]] = None) -> BuildResult:
    """Run one configuration pass in memory. Nothing is written here."""
    manifest = load_manifest(cfg.manifest_path)
    ctx = BuildContext()
    graph = compose(ctx, manifest)
    out = build(graph)
    main_src = render_main(out.stack, argv=argv if cfg.record_argv else None, entry=cfg.entry_name)
    return BuildResult(output=out, main_source=main_src, packages_source=packages_json(out))


def write_build(cfg: BuildConfig, result: BuildResult) -> None:
    for path_s, text in ((cfg.main_out_path, result.main_source), (cfg.packages_out_path, result.packages_source)):
        p = Path(path_s)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")

    log_event(
        _LOG,
        "build_written",
        main=cfg.main_out_path,
        packages=cfg.packages_out_path,
        root=result.output.root,
        statements=len(result.output.statements),
    )


def stale_outputs(cfg: BuildConfig, result: BuildResult) -> List[str]:
    """Output paths whose content on disk differs from `result` (missing counts as stale)."""
    stale: List[str] = []
    for path_s, text in ((cfg.main_out_path, result.main_source), (cfg.packages_out_path, result.packages_source)):
        p = Path(path_s)
        if not p.is_file() or p.read_text(encoding="utf-8") != text:
            stale.append(path_s)
    return stale


def run_build(cfg: BuildConfig, *, argv: Optional[Sequence[str]] = None) -> BuildResult:
    # Any failure raises before write_build, so no partial output is left behind.
    result = build_manifest(cfg, argv=argv)
    write_build(cfg, result)
    return result
