# File: src/mstair/beanpath/base/test_fs_helpers.py
"""
Tests for project root lookup and .env loading.
"""

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from mstair.beanpath.base.fs_helpers import fs_find_pyproject_toml, fs_load_dotenv


_NAME = "BEANPATH_TEST_SETTING"


def test_find_pyproject_toml_walks_up(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert fs_find_pyproject_toml(start_dir=nested) == tmp_path


def test_load_dotenv_from_stream(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown removes the loaded value again
    monkeypatch.setenv(_NAME, "unset")
    monkeypatch.delenv(_NAME)
    assert fs_load_dotenv(stream=io.StringIO(f"{_NAME}=on\n"))
    assert os.environ[_NAME] == "on"


def test_load_dotenv_keeps_existing_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(f"{_NAME}=file\n")
    monkeypatch.setenv(_NAME, "process")
    fs_load_dotenv(dotenv_path=env_file)
    assert os.environ[_NAME] == "process"
    fs_load_dotenv(dotenv_path=env_file, override=True)
    assert os.environ[_NAME] == "file"


# End of file: src/mstair/beanpath/base/test_fs_helpers.py
