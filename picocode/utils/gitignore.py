"""
``.gitignore`` matching for directory walks.

Patterns are read from the ``.gitignore`` of every directory between the
sandbox root and the directory being walked, and from each directory the
walk descends into. Patterns from deeper files are checked later, and the
last matching pattern wins, so a nested ``!keep.log`` can re-include a file
ignored higher up.

Supported syntax: globs (``*``, ``?``, ``[...]``), a leading ``**/``,
directory-only patterns (trailing ``/``), anchored patterns (containing a
``/``) and negation (leading ``!``). A git repository is not required.
"""

import fnmatch
import logging
from pathlib import Path

from picocode.constants import DEFAULT_ENCODING, GITIGNORE_FILE_NAME

logger = logging.getLogger(__name__)


class IgnorePattern:
    """
    One parsed ``.gitignore`` line.

    Parameters
    ----------
    line : str
        Pattern text, already stripped of comments and whitespace.
    base : Path
        Directory holding the ``.gitignore`` the line came from.
    """

    def __init__(self, line: str, base: Path) -> None:
        self.base: Path = base
        self.negated: bool = line.startswith("!")
        pattern: str = line[1:] if self.negated else line

        self.dir_only: bool = pattern.endswith("/")
        pattern = pattern.rstrip("/")

        self.anywhere: bool = pattern.startswith("**/")
        if self.anywhere:
            pattern = pattern[3:]
        # A slash anywhere but the end ties the pattern to ``base``.
        self.anchored: bool = "/" in pattern and not self.anywhere
        self.pattern: str = pattern.lstrip("/")

    def matches(self, path: Path, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        try:
            relative: str = path.relative_to(self.base).as_posix()
        except ValueError:
            return False
        if self.anywhere:
            return fnmatch.fnmatch(relative, self.pattern) or fnmatch.fnmatch(
                relative,
                f"*/{self.pattern}",
            )
        if self.anchored:
            return fnmatch.fnmatch(relative, self.pattern)
        return fnmatch.fnmatch(path.name, self.pattern)


def read_patterns(directory: Path) -> list[IgnorePattern]:
    """
    Parse ``directory/.gitignore``.

    Returns an empty list if the file is missing or unreadable.
    """
    gitignore: Path = directory / GITIGNORE_FILE_NAME
    if not gitignore.is_file():
        return []

    try:
        content: str = gitignore.read_text(encoding=DEFAULT_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping unreadable {gitignore}: {e}")
        return []

    patterns: list[IgnorePattern] = []
    for raw in content.splitlines():
        line: str = raw.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(IgnorePattern(line, directory))
    return patterns


class IgnoreRules:
    """
    The ``.gitignore`` patterns in effect for one directory.

    Parameters
    ----------
    patterns : list[IgnorePattern] | None, optional
        Patterns in precedence order, outermost file first.

    Examples
    --------
    With ``build/`` in ``/work/.gitignore``:

    >>> rules = IgnoreRules.for_directory(Path("/work/src"), root=Path("/work"))
    >>> rules.is_ignored(Path("/work/src/build"), is_dir=True)
    True
    """

    def __init__(self, patterns: list[IgnorePattern] | None = None) -> None:
        self.patterns: list[IgnorePattern] = patterns or []

    @classmethod
    def for_directory(cls, directory: Path, root: Path | None = None) -> "IgnoreRules":
        """
        Collect the rules for ``directory``.

        Reads the ``.gitignore`` of ``root``, of every directory between
        ``root`` and ``directory``, and of ``directory`` itself. Without a
        root, or when ``directory`` is not under it, only ``directory`` is
        read.
        """
        chain: list[Path] = [directory]
        if root is not None and root in directory.parents:
            chain = [
                parent
                for parent in reversed(directory.parents)
                if parent == root or root in parent.parents
            ] + chain

        rules = cls()
        for current in chain:
            rules = rules.child(current)
        return rules

    def child(self, directory: Path) -> "IgnoreRules":
        """Rules for a subdirectory: these plus its own ``.gitignore``."""
        extra: list[IgnorePattern] = read_patterns(directory)
        if not extra:
            return self
        return IgnoreRules(self.patterns + extra)

    def is_ignored(self, path: Path, is_dir: bool) -> bool:
        ignored: bool = False
        for pattern in self.patterns:
            if pattern.matches(path, is_dir):
                ignored = not pattern.negated
        return ignored
