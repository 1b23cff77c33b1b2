"""errors.py"""

from enum import Enum
from pathlib import Path
from typing import Optional


class ReturnCode(int, Enum):
    """Process exit codes"""

    SUCCESS = 0
    INVALID_ARGUMENTS = 1
    NOT_FOUND = 2
    FAILED = 3


class SymLinkMirrorError(Exception):
    """Root of the error hierarchy"""

    return_code: ReturnCode = ReturnCode.FAILED


class InvalidArguments(SymLinkMirrorError):
    """Wrong number of command line arguments"""

    return_code = ReturnCode.INVALID_ARGUMENTS


class SourceNotFound(SymLinkMirrorError):
    """The source path does not resolve to an existing directory"""

    return_code = ReturnCode.NOT_FOUND

    def __init__(self, path: Path) -> None:
        super().__init__("The source folder wasn't found.")
        self.path = path


class SourceCycleDetected(SymLinkMirrorError):
    """A directory link in the source leads back to a directory being mirrored"""

    def __init__(self, path: Path, resolved: Path) -> None:
        super().__init__(f"Directory cycle in source: {path} -> {resolved}")
        self.path = path
        self.resolved = resolved


class DestinationOverlapsSource(SymLinkMirrorError):
    """The destination is, or lies inside, the source being mirrored"""

    def __init__(self, path: Path, source: Path) -> None:
        super().__init__(f"Destination {path} overlaps the source {source}, source files would be replaced")
        self.path = path
        self.source = source


class LinkCreationFailed(SymLinkMirrorError, OSError):
    """
    Raised when the platform refuses to create a symbolic link.

    `code` is the native error code reported by the operating system (``winerror`` on Windows, ``errno``
    everywhere else).
    """

    HINT = (
        "Creation of the symbolic link failed. You may not have permission to create a symbolic link at the "
        "destination. Creation of symbolic links requires administrator privileges and elevation."
    )

    def __init__(self, code: int, link_path: Path, target: Path, reason: Optional[str] = None) -> None:
        super().__init__(code, self.HINT)
        self.code = code
        self.link_path = link_path
        self.target = target
        self.reason = reason

    def __str__(self) -> str:
        s = f"{self.HINT}  ({self.code})"
        if self.reason:
            s += f" {self.link_path} -> {self.target}: {self.reason}"
        return s

    @classmethod
    def from_os_error(cls, error: OSError, link_path: Path, target: Path) -> "LinkCreationFailed":
        code = getattr(error, "winerror", None) or error.errno or 0
        return cls(code=code, link_path=link_path, target=target, reason=error.strerror)
