# src/stackweave/env.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

PREFIX = "STACKWEAVE_"

_LOADED: Optional[Path] = None


def dotenv_candidate(dotenv_path: Optional[str] = None) -> Path:
    """Argument, else STACKWEAVE_DOTENV_PATH, else ./.env."""
    return Path(dotenv_path or os.getenv("STACKWEAVE_DOTENV_PATH", ".env")).expanduser()


def load_dotenv_if_present(dotenv_path: Optional[str] = None) -> bool:
    """
    Load STACKWEAVE_* build settings from a .env file, once per process.

    Variables already set in the environment win over the file, and keys
    without the STACKWEAVE_ prefix are ignored.

    Returns True if a file was found and loaded.
    """
    global _LOADED
    if _LOADED is not None:
        return False

    path = dotenv_candidate(dotenv_path)
    if not path.is_file():
        return False

    for k, v in dotenv_values(path).items():
        if k.startswith(PREFIX) and v is not None:
            os.environ.setdefault(k, v)
    _LOADED = path
    return True


def reset_dotenv_state() -> None:
    global _LOADED
    _LOADED = None
