"""
Filesystem helpers shared by the builtin tools.

Nothing here checks sandbox containment. Callers resolve their paths with
:func:`picocode.safety.sandbox.resolve_in_sandbox` first.
"""

import logging
import os
from pathlib import Path
from typing import Iterator

from picocode.constants import (
    DEFAULT_BINARY_CHECK_CHUNK_SIZE,
    DEFAULT_ENCODING,
    SKIPPED_DIRECTORIES,
)
from picocode.types import PathLike
from picocode.utils.gitignore import IgnoreRules

logger = logging.getLogger(__name__)


def ensure_parent_directory(path: PathLike) -> Path:
    """
    Ensure the parent directory of a path exists.

    Parameters
    ----------
    path : PathLike
        Path whose parent directory should be created.

    Returns
    -------
    Path
        The path object.

    Raises
    ------
    OSError
        If directory creation fails.
    """
    path_obj: Path = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    return path_obj


def is_binary_file(path: PathLike) -> bool:
    """
    Check if a file is binary by looking for null bytes in its first chunk.

    Parameters
    ----------
    path : PathLike
        Path to the file to check.

    Returns
    -------
    bool
        True if the file appears to be binary, False otherwise.

    Examples
    --------
    >>> is_binary_file("logo.png")
    True
    >>> is_binary_file("main.py")
    False
    """
    try:
        with open(path, "rb") as f:
            chunk: bytes = f.read(DEFAULT_BINARY_CHECK_CHUNK_SIZE)
            return b"\x00" in chunk
    except OSError as e:
        logger.debug(f"Failed to check if file is binary: {path}: {e}")
        return False


def read_text(path: Path) -> str:
    """Read a text file, falling back to latin-1 for undecodable bytes."""
    try:
        return path.read_text(encoding=DEFAULT_ENCODING)
    except UnicodeDecodeError:
        return path.read_text(encoding="latin-1")


def walk_files(base: Path, root: Path | None = None) -> Iterator[Path]:
    """
    Yield every regular file under ``base`` that is not ignored.

    Directories in :data:`~picocode.constants.SKIPPED_DIRECTORIES` are not
    descended into, and neither are directories or files matched by a
    ``.gitignore`` between ``root`` and the file. If ``base`` is a file it
    is yielded on its own.

    Parameters
    ----------
    base : Path
        File or directory to walk.
    root : Path | None, optional
        Sandbox root. ``.gitignore`` files from here down to ``base`` apply.

    Yields
    ------
    Path
        File paths in walk order.
    """
    if base.is_file():
        yield base
        return

    rules: dict[Path, IgnoreRules] = {base: IgnoreRules.for_directory(base, root)}
    for dirpath, dirs, filenames in os.walk(base):
        current: Path = Path(dirpath)
        ignore: IgnoreRules = rules.pop(current)

        kept: list[str] = []
        for name in sorted(dirs):
            child: Path = current / name
            if name in SKIPPED_DIRECTORIES or ignore.is_ignored(child, is_dir=True):
                continue
            kept.append(name)
            rules[child] = ignore.child(child)
        dirs[:] = kept

        for filename in sorted(filenames):
            file_path: Path = current / filename
            if not ignore.is_ignored(file_path, is_dir=False):
                yield file_path
