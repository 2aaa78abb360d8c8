from __future__ import annotations

import os
from pathlib import Path

import pytest

from stackweave.env import load_dotenv_if_present, reset_dotenv_state


@pytest.fixture(autouse=True)
def _fresh_state():
    reset_dotenv_state()
    yield
    reset_dotenv_state()


def test_loads_prefixed_keys_only(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STACKWEAVE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("UNRELATED_SETTING", raising=False)
    p = tmp_path / ".env"
    p.write_text("STACKWEAVE_LOG_LEVEL=DEBUG\nUNRELATED_SETTING=1\n", encoding="utf-8")

    assert load_dotenv_if_present(str(p)) is True
    assert os.environ["STACKWEAVE_LOG_LEVEL"] == "DEBUG"
    assert "UNRELATED_SETTING" not in os.environ
    monkeypatch.delenv("STACKWEAVE_LOG_LEVEL")


def test_environment_wins_and_loads_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STACKWEAVE_LOG_LEVEL", "ERROR")
    p = tmp_path / ".env"
    p.write_text("STACKWEAVE_LOG_LEVEL=DEBUG\n", encoding="utf-8")

    assert load_dotenv_if_present(str(p)) is True
    assert os.environ["STACKWEAVE_LOG_LEVEL"] == "ERROR"
    assert load_dotenv_if_present(str(p)) is False


def test_missing_file_is_not_an_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STACKWEAVE_DOTENV_PATH", str(tmp_path / "absent.env"))
    assert load_dotenv_if_present() is False
