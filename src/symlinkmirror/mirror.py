import logging
import os
from pathlib import Path
from typing import List, Optional, Set, Tuple

from symlinkmirror.errors import DestinationOverlapsSource, SourceCycleDetected
from symlinkmirror.links import LinkCreator

log = logging.getLogger(__name__)

# Work stack actions
_ENTER = "enter"
_LEAVE = "leave"


def _scan(src: Path) -> Tuple[List[os.DirEntry], List[os.DirEntry]]:
    """Splits the direct children of `src` into (files, directories), keeping enumeration order"""
    files = []
    dirs = []
    with os.scandir(src) as it:
        for entry in it:
            if entry.is_dir():
                dirs.append(entry)
            else:
                files.append(entry)
    return files, dirs


def _check_overlap(dst: Path, root: Path) -> None:
    """Raises when `dst` resolves to the source root or somewhere below it"""
    resolved = dst.resolve()
    if resolved == root or root in resolved.parents:
        raise DestinationOverlapsSource(path=dst, source=root)


def _mirror(src: Path, dst: Path, creator: LinkCreator, active: Optional[Set[Path]]) -> int:
    root = src.resolve()
    created = 0

    # LIFO so the walk is depth-first; a directory's subdirectories are pushed in reverse to keep enumeration order
    stack: List[Tuple[str, Path, Path]] = [(_ENTER, src, dst)]
    while stack:
        action, s, d = stack.pop()

        if action == _LEAVE:
            if active is not None:
                active.discard(s)
            continue

        _check_overlap(d, root)

        if active is not None:
            resolved = s.resolve()
            if resolved in active:
                raise SourceCycleDetected(path=s, resolved=resolved)
            active.add(resolved)
            stack.append((_LEAVE, resolved, d))

        if not d.is_dir():
            log.debug("Creating directory %s", d)
            d.mkdir(parents=True, exist_ok=True)

        files, dirs = _scan(s)

        for f in files:
            creator.create_file_link(s.joinpath(f.name), d.joinpath(f.name))
            created += 1

        for sub in reversed(dirs):
            stack.append((_ENTER, s.joinpath(sub.name), d.joinpath(sub.name)))

    return created


def link_mirror(
    src: Path,
    dst: Path,
    creator: Optional[LinkCreator] = None,
    detect_cycles: bool = True,
) -> int:
    """
    Creates a mirror of the source directory filled with symbolic links to the files. This function does not remove
    any files/directories that exist in `dst` if they dont exist in `src`.

    Every directory level is a real directory. Files are linked before descending into subdirectories. The first
    failure aborts the walk, links created up to that point stay on disk. A destination that is, or ends up
    inside, the source raises DestinationOverlapsSource before anything in it is touched.

    Parameters
    ----------
    src : Path
        The root directory to mirror
    dst : Path
        The root of the directory containing the links
    creator : LinkCreator
        Creates the individual links, defaults to a LinkCreator for this platform
    detect_cycles : bool
        Raise SourceCycleDetected when a linked directory in `src` leads back to a directory being mirrored

    Returns
    -------
    int
        Number of links created
    """
    if creator is None:
        creator = LinkCreator()

    src = Path(os.path.abspath(src))
    dst = Path(os.path.abspath(dst))

    active: Optional[Set[Path]] = set() if detect_cycles else None
    return _mirror(src, dst, creator, active)
