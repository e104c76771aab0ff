# File: src/mstair/beanpath/base/fs_helpers.py
"""
File system helpers for locating project files and loading ``.env`` settings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, TypeAlias

import dotenv


StrPath: TypeAlias = str | Path

_fs_pyproject_toml_cache: dict[Path, Path | None] = {}


def fs_find_pyproject_toml(*, start_dir: Path | None = None) -> Path | None:
    """
    Return the directory holding the nearest ``pyproject.toml``, or None.

    Results are cached per start directory.

    :param start_dir: Directory to start searching from, default is the current working directory.
    :return: Absolute directory path, or None if no ancestor holds a pyproject.toml.
    """
    start_dir = (start_dir or Path.cwd()).absolute()
    if start_dir not in _fs_pyproject_toml_cache:
        found: Path | None = None
        for directory in [start_dir, *start_dir.parents]:
            if (directory / "pyproject.toml").is_file():
                found = directory
                break
        _fs_pyproject_toml_cache[start_dir] = found
    return _fs_pyproject_toml_cache[start_dir]


def fs_load_dotenv(
    *,
    logger: logging.Logger | None = None,
    dotenv_path: StrPath | None = None,
    stream: IO[str] | None = None,
    override: bool = False,
) -> bool:
    """
    Load variables from a ``.env`` file into the process environment.

    If both `dotenv_path` and `stream` are None, ``dotenv.find_dotenv()``
    locates the file starting from the current working directory.

    :param logger: Logger receiving python-dotenv diagnostics; enables verbose output.
    :param dotenv_path: Absolute or relative path to the .env file.
    :param stream: Text stream with .env content, used if `dotenv_path` is None.
    :param override: Whether .env values replace variables already set.
    :return: True if at least one variable was set, else False.
    """
    verbose = False
    if logger is not None:
        dotenv.main.logger = logger
        verbose = True
    if dotenv_path is None and stream is None:
        dotenv_path = dotenv.find_dotenv(usecwd=True)
    return dotenv.load_dotenv(
        dotenv_path=dotenv_path or None,
        stream=stream,
        verbose=verbose,
        override=override,
        encoding="utf-8",
    )


# End of file: src/mstair/beanpath/base/fs_helpers.py
