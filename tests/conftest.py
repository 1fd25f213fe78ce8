"""Shared test fixtures."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from brew_installer.config import InstallerConfig
from brew_installer.context import InstallCtx
from brew_installer.lib.accounts import Account
from brew_installer.lib.command import CmdResult, check_result
from brew_installer.models import InstallRequest

Reply = Tuple[int, str, str]
Handler = Callable[[List[str], Optional[str]], Reply]

PKG_NAME = "Command Line Tools.pkg"

SOFTWAREUPDATE_LISTING = """\
Software Update Tool

Finding available software
Software Update found the following new or updated software:
* Label: Command Line Tools for Xcode-14.3
\tTitle: Command Line Tools for Xcode, Version: 14.3, Size: 711044KiB, Recommended: YES,
* Label: Command Line Tools for Xcode-15.3
\tTitle: Command Line Tools for Xcode, Version: 15.3, Size: 751793KiB, Recommended: YES,
"""


@dataclass(frozen=True)
class Call:
    argv: List[str]
    user: Optional[str]
    cwd: Optional[str]
    timeout: Optional[float]


class FakeRunner:
    """Records commands instead of running them.

    Handlers are keyed by "argv0 argv1" or "argv0"; a handler returns
    (returncode, stdout, stderr) and may touch the filesystem or raise.
    """

    def __init__(self, handlers: Optional[Dict[str, Handler]] = None) -> None:
        self.calls: List[Call] = []
        self.handlers: Dict[str, Handler] = dict(handlers or {})

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        cwd: Optional[str] = None,
        user: Optional[str] = None,
        timeout: Optional[float] = None,
        dry_run: bool = False,
    ) -> CmdResult:
        argv_list = list(argv)
        self.calls.append(Call(argv=argv_list, user=user, cwd=cwd, timeout=timeout))
        handler = self.handlers.get(" ".join(argv_list[:2])) or self.handlers.get(argv_list[0])
        rc, out, err = handler(argv_list, cwd) if handler and not dry_run else (0, "", "")
        result = CmdResult(argv=argv_list, returncode=rc, stdout=out, stderr=err)
        if check:
            check_result(result)
        return result

    def argv0s(self) -> List[str]:
        return [" ".join(c.argv[:2]) for c in self.calls]

    def ran(self, prefix: str) -> bool:
        return any(" ".join(c.argv).startswith(prefix) for c in self.calls)

    def find(self, prefix: str) -> Call:
        for c in self.calls:
            if " ".join(c.argv).startswith(prefix):
                return c
        raise AssertionError(f"no call starting with {prefix!r}; calls: {self.argv0s()}")


def fail(returncode: int = 1, stderr: str = "boom") -> Handler:
    def _handler(argv: List[str], cwd: Optional[str]) -> Reply:
        return returncode, "", stderr

    return _handler


def _unzip(archive_root: str) -> Handler:
    def _handler(argv: List[str], cwd: Optional[str]) -> Reply:
        dest = Path(argv[argv.index("-d") + 1]) / archive_root
        (dest / "bin").mkdir(parents=True)
        (dest / "bin" / "brew").write_text("#!/bin/bash\n")
        (dest / "Library").mkdir()
        (dest / ".gitignore").write_text("/Cellar\n")
        (dest / ".github").mkdir()
        (dest / "README.md").write_text("Homebrew\n")
        return 0, "", ""

    return _handler


def _ln(argv: List[str], cwd: Optional[str]) -> Reply:
    target, link = argv[-2], argv[-1]
    Path(link).unlink(missing_ok=True)
    os.symlink(target, link)
    return 0, "", ""


def _hdiutil_attach(argv: List[str], cwd: Optional[str]) -> Reply:
    mountpoint = Path(argv[argv.index("-mountpoint") + 1])
    (mountpoint / PKG_NAME).write_text("pkg")
    return 0, "", ""


def _echo_shell(shell: str) -> Handler:
    def _handler(argv: List[str], cwd: Optional[str]) -> Reply:
        return 0, shell + "\n", ""

    return _handler


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() so handlers do not leak between tests."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for h in root.handlers[:]:
        if h not in before:
            root.removeHandler(h)
            h.close()
    for attr in ("_brew_installer_configured", "_brew_installer_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


@pytest.fixture
def prefix(tmp_path: Path) -> Path:
    p = tmp_path / "usr_local"
    p.mkdir()
    return p


@pytest.fixture
def account(tmp_path: Path) -> Account:
    (tmp_path / "Users").mkdir()
    return Account(
        name="alice",
        uid=os.getuid(),
        gid=os.getgid(),
        home=str(tmp_path / "Users" / "alice"),
        shell="/bin/bash",
    )


@pytest.fixture
def cfg(tmp_path: Path, prefix: Path) -> InstallerConfig:
    return InstallerConfig(
        raw={
            "prefix": str(prefix),
            "clt_placeholder": str(tmp_path / "clt-in-progress"),
        }
    )


@pytest.fixture(autouse=True)
def current_group(monkeypatch: pytest.MonkeyPatch) -> int:
    """Resolve the 'admin' group to our own gid so chown needs no privileges."""
    gid = os.getgid()
    monkeypatch.setattr("brew_installer.steps.step_20_provision.lookup_group_id", lambda name: gid)
    return gid


@pytest.fixture
def host_handlers(cfg: InstallerConfig) -> Dict[str, Handler]:
    """Handlers for a macOS host where every command succeeds."""
    return {
        "unzip": _unzip(cfg.archive_root),
        "ln": _ln,
        "hdiutil attach": _hdiutil_attach,
        "softwareupdate --list": lambda argv, cwd: (0, SOFTWAREUPDATE_LISTING, ""),
        "/bin/sh": _echo_shell("/bin/bash"),
    }


@pytest.fixture
def runner(host_handlers: Dict[str, Handler]) -> FakeRunner:
    return FakeRunner(host_handlers)


@pytest.fixture
def make_ctx(cfg: InstallerConfig, account: Account, runner: FakeRunner):
    def _make(request: Optional[InstallRequest] = None, config: Optional[InstallerConfig] = None) -> InstallCtx:
        return InstallCtx(
            request=request or InstallRequest(user="alice"),
            cfg=config or cfg,
            account=account,
            runner=runner,
        )

    return _make


def shell_reply(shell: str) -> Handler:
    return _echo_shell(shell)
