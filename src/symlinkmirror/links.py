"""
Creation of single symbolic links.

The platform specific part lives behind :class:`LinkBackend`. A backend only has to create a link or raise an
``OSError``; :class:`LinkCreator` handles overwriting and turns the failure into :class:`LinkCreationFailed`.
"""

import ctypes
import logging
import os
import stat
from pathlib import Path
from typing import Optional, Protocol

from symlinkmirror.errors import DestinationOverlapsSource, LinkCreationFailed

log = logging.getLogger(__name__)


class LinkBackend(Protocol):
    def create_file_link(self, target: Path, link_path: Path) -> None:
        ...

    def create_directory_link(self, target: Path, link_path: Path) -> None:
        ...


class PosixLinkBackend:
    """os.symlink, file and directory links are the same thing here"""

    def create_file_link(self, target: Path, link_path: Path) -> None:
        os.symlink(target, link_path, target_is_directory=False)

    def create_directory_link(self, target: Path, link_path: Path) -> None:
        os.symlink(target, link_path, target_is_directory=True)


class WindowsLinkBackend:
    """
    Calls CreateSymbolicLinkW directly so the unprivileged flag can be passed. Without developer mode the flag
    is ignored and the call needs an elevated prompt.
    """

    SYMBOLIC_LINK_FLAG_FILE = 0x0
    SYMBOLIC_LINK_FLAG_DIRECTORY = 0x1
    SYMBOLIC_LINK_FLAG_ALLOW_UNPRIVILEGED_CREATE = 0x2

    def __init__(self, allow_unprivileged: bool = True) -> None:
        self.allow_unprivileged = allow_unprivileged
        kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)  # type: ignore[attr-defined]
        self._create = kernel32.CreateSymbolicLinkW
        self._create.argtypes = (ctypes.c_wchar_p, ctypes.c_wchar_p, ctypes.c_uint32)
        self._create.restype = ctypes.c_ubyte

    def _link(self, target: Path, link_path: Path, flags: int) -> None:
        if self.allow_unprivileged:
            flags |= self.SYMBOLIC_LINK_FLAG_ALLOW_UNPRIVILEGED_CREATE

        if not self._create(str(link_path), str(target), flags):
            code = ctypes.get_last_error()  # type: ignore[attr-defined]
            raise ctypes.WinError(code)  # type: ignore[attr-defined]

    def create_file_link(self, target: Path, link_path: Path) -> None:
        self._link(target, link_path, self.SYMBOLIC_LINK_FLAG_FILE)

    def create_directory_link(self, target: Path, link_path: Path) -> None:
        self._link(target, link_path, self.SYMBOLIC_LINK_FLAG_DIRECTORY)


def default_backend(allow_unprivileged: bool = True) -> LinkBackend:
    """Returns the backend for the running platform"""
    if os.name == "nt":
        return WindowsLinkBackend(allow_unprivileged=allow_unprivileged)
    return PosixLinkBackend()


def copy_attributes_and_timestamps(source: Path, link: Path) -> None:
    """
    Copies permission bits, access time and modification time from `source` onto the link itself.

    Best-effort only. Platforms that can't change a link without following it (Linux can't chmod a link) are
    skipped silently, creation time is never copied.
    """
    try:
        st = source.stat()
        if os.utime in os.supports_follow_symlinks:
            os.utime(link, ns=(st.st_atime_ns, st.st_mtime_ns), follow_symlinks=False)
        if os.chmod in os.supports_follow_symlinks:
            os.chmod(link, stat.S_IMODE(st.st_mode), follow_symlinks=False)
    except (OSError, NotImplementedError) as e:
        log.debug("Could not copy attributes %s -> %s: %s", source, link, e)


def _same_entry(a: Path, b: Path) -> bool:
    """True when both paths name the same directory entry, links in the entry itself are not followed"""
    return a.name == b.name and a.parent.resolve() == b.parent.resolve()


class LinkCreator:
    """
    Creates one symbolic link per call

    Parameters
    ----------
    backend : LinkBackend
        Platform implementation, defaults to :func:`default_backend`
    copy_attributes : bool
        Copy permissions and timestamps from the source onto each new link
    """

    def __init__(self, backend: Optional[LinkBackend] = None, copy_attributes: bool = False) -> None:
        self.backend = backend if backend is not None else default_backend()
        self.copy_attributes = copy_attributes

    def create_file_link(self, existing_file_path: Path, link_path: Path) -> None:
        """
        Creates a file symbolic link at `link_path` pointing to `existing_file_path`.

        Anything already at `link_path` that isn't a directory is deleted first. A directory is left alone and
        the link creation is expected to fail. A path that is the source file itself is never deleted.
        """
        if os.path.lexists(link_path) and not link_path.is_dir():
            if _same_entry(link_path, existing_file_path):
                raise DestinationOverlapsSource(path=link_path, source=existing_file_path)
            link_path.unlink()

        try:
            self.backend.create_file_link(existing_file_path, link_path)
        except OSError as e:
            raise LinkCreationFailed.from_os_error(e, link_path=link_path, target=existing_file_path) from e

        if self.copy_attributes:
            copy_attributes_and_timestamps(existing_file_path, link_path)

        log.debug("%s -> %s", link_path, existing_file_path)

    def create_directory_link(self, existing_dir_path: Path, link_path: Path) -> None:
        """
        Creates a directory symbolic link. Fails if anything already exists at `link_path`.
        """
        try:
            self.backend.create_directory_link(existing_dir_path, link_path)
        except OSError as e:
            raise LinkCreationFailed.from_os_error(e, link_path=link_path, target=existing_dir_path) from e

        if self.copy_attributes:
            copy_attributes_and_timestamps(existing_dir_path, link_path)

        log.debug("%s -> %s", link_path, existing_dir_path)
