#!/usr/bin/env python3
"""
Generate generated/main_stack.py and generated/packages.json from a stack manifest.

The generated module wires the chosen device implementations together in
dependency order; packages.json holds the merged package/version table and the
runtime arguments the stack expects. Both are deterministic for a given manifest.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from stackweave.build import run_build  # noqa: E402
from stackweave.build_logging import configure_structured_logging  # noqa: E402
from stackweave.config import load_build_config  # noqa: E402
from stackweave.core import CompositionError  # noqa: E402
from stackweave.env import load_dotenv_if_present  # noqa: E402


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None, help="Path to a JSON build config")
    ap.add_argument("--manifest", default=None, help="Path to a stack manifest (YAML)")
    ap.add_argument("--out", default=None, help="Output path for the generated main module")
    ap.add_argument("--packages-out", default=None, help="Output path for packages.json")
    ap.add_argument("--entry", default=None, help="Name of the generated entry function")
    ap.add_argument("--record-argv", action="store_true", default=None, help="Record this command in the header")
    args = ap.parse_args(argv)

    load_dotenv_if_present()

    try:
        cfg = load_build_config(
            config_path=args.config,
            overrides={
                "manifest_path": args.manifest,
                "main_out_path": args.out,
                "packages_out_path": args.packages_out,
                "entry_name": args.entry,
                "record_argv": args.record_argv,
            },
        )
    except ValueError as e:
        raise SystemExit(f"❌ Invalid build config: {e}") from e

    configure_structured_logging(cfg.log_level)

    try:
        result = run_build(cfg, argv=["gen_stack.py", *(argv if argv is not None else sys.argv[1:])])
    except CompositionError as e:
        raise SystemExit(f"❌ {e}") from e

    out = result.output
    print(f"✅ wrote {cfg.main_out_path} ({len(out.statements)} bindings, root {out.root})")
    print(f"✅ wrote {cfg.packages_out_path} ({len(out.packages)} packages)")


if __name__ == "__main__":
    main()
