from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .errors import CommandError, InstallerError, InvalidRequest, StageError
from .lib.env import UPSTREAM

STATUS_DONE = "done"
STATUS_FAILED = "failed"
STATUS_ALREADY_INSTALLED = "already_installed"

SUPERUSERS = {"root"}


@dataclass(frozen=True)
class InstallRequest:
    user: str
    tools_url: Optional[str] = None
    tools_pkg_name: Optional[str] = None
    # Informational only: the fetch uses InstallerConfig.archive_url.
    brew_source: str = UPSTREAM.brew_source

    def validate(self) -> "InstallRequest":
        if not self.user or not self.user.strip():
            raise InvalidRequest("user is required")
        if self.user in SUPERUSERS:
            raise InvalidRequest("Homebrew cannot be installed as root")
        if bool(self.tools_url) != bool(self.tools_pkg_name):
            raise InvalidRequest("tools_url and tools_pkg_name must be given together")
        if not self.brew_source:
            raise InvalidRequest("brew_source must be a non-empty URL")
        return self


@dataclass(frozen=True)
class DirectorySpec:
    path: str
    mode: int
    owner: str
    group: str


@dataclass(frozen=True)
class ErrorReport:
    kind: str
    message: str
    stage: Optional[str] = None
    argv: Optional[List[str]] = None
    returncode: Optional[int] = None
    stderr: Optional[str] = None
    timed_out: bool = False

    @classmethod
    def from_exception(cls, exc: BaseException, *, stage: Optional[str] = None) -> "ErrorReport":
        command: Optional[CommandError] = None
        if isinstance(exc, StageError):
            stage = exc.stage
            command = exc.command
        elif isinstance(exc, CommandError):
            command = exc

        result = command.result if command is not None else None
        return cls(
            kind=exc.kind if isinstance(exc, InstallerError) else type(exc).__name__,
            message=str(exc),
            stage=stage,
            argv=command.argv if command is not None else None,
            returncode=result.returncode if result is not None else None,
            stderr=result.stderr if result is not None else None,
            timed_out=command.timed_out if command is not None else False,
        )

    def describe(self) -> str:
        lines = [f"{self.kind}" + (f" in stage {self.stage}" if self.stage else "") + f": {self.message}"]
        if self.argv:
            lines.append("command: " + " ".join(self.argv))
        if self.timed_out:
            lines.append("the command timed out")
        if self.stderr:
            lines.append("stderr:\n" + self.stderr.rstrip())
        return "\n".join(lines)


@dataclass
class InstallOutcome:
    status: str
    attempted: bool
    steps_completed: List[str] = field(default_factory=list)
    skipped_reason: Optional[str] = None
    error: Optional[ErrorReport] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILED

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstallOutcome":
        err = data.get("error")
        return cls(
            status=str(data["status"]),
            attempted=bool(data.get("attempted", False)),
            steps_completed=list(data.get("steps_completed") or []),
            skipped_reason=data.get("skipped_reason"),
            error=ErrorReport(**err) if err else None,
            warnings=list(data.get("warnings") or []),
        )
