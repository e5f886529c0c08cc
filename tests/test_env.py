from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from title_search.utils import env as mod


def test_load_env_reads_pinned_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog) -> None:  # noqa: ANN001
    env_file = tmp_path / "search.env"
    env_file.write_text("TITLE_SEARCH_ENV_SAMPLE=from-file\n", encoding="utf-8")
    monkeypatch.setenv(mod.ENV_FILE_VARIABLE, str(env_file))
    monkeypatch.delenv("TITLE_SEARCH_ENV_SAMPLE", raising=False)

    try:
        with caplog.at_level(logging.DEBUG, logger=mod.__name__):
            loaded = mod.load_env()

        assert loaded == env_file
        assert os.environ["TITLE_SEARCH_ENV_SAMPLE"] == "from-file"
        assert str(env_file) in caplog.text
    finally:
        os.environ.pop("TITLE_SEARCH_ENV_SAMPLE", None)


def test_load_env_keeps_existing_values_unless_overridden(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / "search.env"
    env_file.write_text("OMDB_API_KEY=from-file\n", encoding="utf-8")
    monkeypatch.setenv(mod.ENV_FILE_VARIABLE, str(env_file))
    monkeypatch.setenv("OMDB_API_KEY", "from-process")

    mod.load_env()
    assert os.environ["OMDB_API_KEY"] == "from-process"

    mod.load_env(override=True)
    assert os.environ["OMDB_API_KEY"] == "from-file"


def test_load_env_missing_pinned_file_returns_none(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(mod.ENV_FILE_VARIABLE, str(tmp_path / "absent.env"))

    assert mod.load_env() is None
