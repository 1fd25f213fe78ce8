from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from .config import InstallerConfig
from .lib.accounts import Account
from .lib.command import CmdResult, Runner, run_cmd
from .lib.env import SYSTEM_DIRECTORIES, USER_DIRECTORIES
from .models import DirectorySpec, InstallRequest


@dataclass
class InstallCtx:
    request: InstallRequest
    cfg: InstallerConfig
    account: Account
    runner: Runner = run_cmd
    warnings: List[str] = field(default_factory=list)

    @property
    def dry_run(self) -> bool:
        return self.cfg.dry_run

    @property
    def user(self) -> str:
        return self.account.name

    @property
    def home(self) -> Path:
        return Path(self.account.home)

    @property
    def repo_dir(self) -> Path:
        return self.cfg.repo_dir

    @property
    def marker_path(self) -> Path:
        return self.cfg.marker_path

    @property
    def cache_dir(self) -> Path:
        return self.home / "Library/Caches/Homebrew"

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        cwd: str | Path | None = None,
        user: str | None = None,
        timeout: float | None = None,
    ) -> CmdResult:
        return self.runner(
            argv,
            check=check,
            cwd=str(cwd) if cwd is not None else None,
            user=user,
            timeout=timeout if timeout is not None else self.cfg.command_timeout,
            dry_run=self.dry_run,
        )

    def _spec(self, path: Path) -> DirectorySpec:
        return DirectorySpec(path=str(path), mode=self.cfg.directory_mode, owner=self.user, group=self.cfg.group)

    def system_directories(self) -> List[DirectorySpec]:
        return [self._spec(self.cfg.prefix / rel) for rel in SYSTEM_DIRECTORIES]

    def user_directories(self) -> List[DirectorySpec]:
        return [self._spec(self.home / rel if rel else self.home) for rel in USER_DIRECTORIES]
