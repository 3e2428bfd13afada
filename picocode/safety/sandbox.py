"""
Lexical path containment.

Every path a tool touches is resolved here against the sandbox root before
any I/O happens. Resolution is purely lexical: the filesystem is never
consulted, so ``..`` segments are collapsed textually and symlinks are not
followed.

Known limitation: a symlink inside the root that points outside it is not
detected. Containment here is a guard against the model wandering off with
``../`` paths, not an OS-level jail.
"""

import logging
from pathlib import Path

from picocode.constants import SANDBOX_VIOLATION_MESSAGE
from picocode.exceptions import SandboxViolation, ValidationError
from picocode.types import PathLike

logger = logging.getLogger(__name__)


def normalize_path(path: Path) -> Path:
    """
    Collapse ``.`` and ``..`` segments without touching the filesystem.

    A ``..`` at the anchor stays at the anchor, the way ``/..`` is ``/``.
    Any other segment is kept verbatim, including names such as ``...``.
    A POSIX leading ``//``, which pathlib keeps as a root of its own,
    collapses to ``/``.

    Parameters
    ----------
    path : Path
        An absolute path.

    Returns
    -------
    Path
        The normalized path.

    Examples
    --------
    >>> normalize_path(Path("/work/a/b/../../c"))
    PosixPath('/work/c')
    >>> normalize_path(Path("/work/../../etc"))
    PosixPath('/etc')
    >>> normalize_path(Path("//work/a"))
    PosixPath('/work/a')
    """
    segments: list[str] = []
    for part in path.parts[1:]:
        if part == "..":
            if segments:
                segments.pop()
        elif part != ".":
            segments.append(part)

    anchor: str = path.anchor
    if path.root == "//" and not path.drive:
        anchor = "/"

    return Path(anchor, *segments)


def is_within(path: Path, root: Path) -> bool:
    """
    Check whether a normalized path equals the root or is nested under it.

    Parameters
    ----------
    path : Path
        Normalized absolute path.
    root : Path
        Normalized absolute root.

    Returns
    -------
    bool
        True if ``path`` is ``root`` or a descendant of it.
    """
    return path == root or root in path.parents


def resolve_in_sandbox(root: PathLike, requested: PathLike) -> Path:
    """
    Resolve a requested path against the sandbox root.

    A relative ``requested`` is joined onto ``root``; an absolute one is
    taken as is. The result is normalized lexically and accepted only if it
    is the root itself or lies beneath it. An empty request resolves to the
    root.

    Parameters
    ----------
    root : PathLike
        Absolute sandbox root.
    requested : PathLike
        Path supplied by the model, absolute or relative.

    Returns
    -------
    Path
        The normalized path inside the sandbox.

    Raises
    ------
    ValidationError
        If ``root`` is not absolute.
    SandboxViolation
        If the resolved path escapes ``root``.

    Examples
    --------
    >>> resolve_in_sandbox("/work", "subdir/../file.txt")
    PosixPath('/work/file.txt')
    >>> resolve_in_sandbox("/work", "")
    PosixPath('/work')
    >>> resolve_in_sandbox("/work", "../../etc/passwd")
    Traceback (most recent call last):
        ...
    picocode.exceptions.SandboxViolation: Access denied: path must be within the current directory
    """
    root_path: Path = Path(root)
    if not root_path.is_absolute():
        raise ValidationError(
            f"Sandbox root must be absolute: {root_path}",
            field="root",
        )

    base: Path = normalize_path(root_path)
    resolved: Path = normalize_path(base / Path(requested))

    if not is_within(resolved, base):
        logger.debug(f"Sandbox rejected {str(requested)!r} (resolved to {resolved})")
        raise SandboxViolation(
            SANDBOX_VIOLATION_MESSAGE,
            requested=str(requested),
            root=str(base),
        )

    return resolved


def display_path(path: Path, root: Path) -> str:
    """
    Render a sandboxed path relative to the root for tool output.

    Parameters
    ----------
    path : Path
        Path inside the sandbox.
    root : Path
        Sandbox root.

    Returns
    -------
    str
        The relative path, or ``.`` for the root itself.
    """
    try:
        relative: Path = path.relative_to(root)
    except ValueError:
        return str(path)
    return str(relative) or "."
