#!/usr/bin/env python3
"""
Fail if generated/main_stack.py or generated/packages.json is out of date.

The manifest is rebuilt in memory and compared with the files on disk; nothing
is written. Use the same flags as gen_stack.py.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from stackweave.build import build_manifest, stale_outputs  # noqa: E402
from stackweave.build_logging import configure_structured_logging  # noqa: E402
from stackweave.config import load_build_config  # noqa: E402
from stackweave.core import CompositionError  # noqa: E402
from stackweave.env import load_dotenv_if_present  # noqa: E402


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None, help="Path to a JSON build config")
    ap.add_argument("--manifest", default=None, help="Path to a stack manifest (YAML)")
    ap.add_argument("--out", default=None, help="Generated main module to check")
    ap.add_argument("--packages-out", default=None, help="Generated packages.json to check")
    ap.add_argument("--entry", default=None, help="Name of the generated entry function")
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
            },
        )
    except ValueError as e:
        raise SystemExit(f"❌ Invalid build config: {e}") from e

    configure_structured_logging(cfg.log_level)

    if cfg.record_argv:
        # The header would embed the original command line, which is not known here.
        raise SystemExit("❌ record_argv builds cannot be checked; regenerate with scripts/gen_stack.py")

    try:
        result = build_manifest(cfg)
    except CompositionError as e:
        raise SystemExit(f"❌ {e}") from e

    stale = stale_outputs(cfg, result)
    if stale:
        print(f"❌ out of date: {', '.join(stale)}")
        print("   Run: python3 scripts/gen_stack.py")
        sys.exit(1)

    print(f"✅ generated stack is up to date ({cfg.main_out_path}, {cfg.packages_out_path}).")


if __name__ == "__main__":
    main()
