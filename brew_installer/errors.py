from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from .lib.command import CmdResult


class InstallerError(Exception):
    """Base class for everything the installer raises on purpose."""

    kind = "InstallerError"


class InvalidRequest(InstallerError, ValueError):
    kind = "InvalidRequest"


class Cancelled(InstallerError):
    kind = "Cancelled"


class CommandError(InstallerError):
    def __init__(self, message: str, *, argv: Sequence[str], result: Optional["CmdResult"] = None) -> None:
        super().__init__(message)
        self.argv = list(argv)
        self.result = result

    @property
    def timed_out(self) -> bool:
        return False


class CommandFailed(CommandError):
    kind = "CommandFailed"


class CommandTimeout(CommandError):
    kind = "Timeout"

    def __init__(self, message: str, *, argv: Sequence[str], timeout: float) -> None:
        super().__init__(message, argv=argv)
        self.timeout = timeout

    @property
    def timed_out(self) -> bool:
        return True


class StageError(InstallerError):
    """A step failed; `cause` is the underlying command or OS error, if any."""

    def __init__(self, message: str, *, stage: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.cause = cause

    @property
    def command(self) -> Optional[CommandError]:
        return self.cause if isinstance(self.cause, CommandError) else None


class DirectoryProvisionFailed(StageError):
    kind = "DirectoryProvisionFailed"


class ToolingInstallFailed(StageError):
    kind = "ToolingInstallFailed"


class DownloadFailed(StageError):
    kind = "DownloadFailed"


class UnpackFailed(StageError):
    kind = "UnpackFailed"


class RelocateFailed(StageError):
    kind = "RelocateFailed"


class LinkFailed(StageError):
    kind = "LinkFailed"


class PostInstallCommandFailed(StageError):
    kind = "PostInstallCommandFailed"


class ShellProfileWriteFailed(StageError):
    kind = "ShellProfileWriteFailed"
