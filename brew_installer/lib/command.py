from __future__ import annotations

import logging
import os
import pwd
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

from ..errors import CommandFailed, CommandTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Runner(Protocol):
    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        cwd: str | None = None,
        user: str | None = None,
        timeout: float | None = None,
        dry_run: bool = False,
    ) -> CmdResult:
        ...


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def current_user() -> str:
    return pwd.getpwuid(os.geteuid()).pw_name


def as_user(argv: Sequence[str], user: str | None) -> list[str]:
    """Wrap argv so it runs as `user`, unless we already are that user."""

    if not user or user == current_user():
        return list(argv)
    return ["sudo", "-H", "-u", user, "--", *argv]


def check_result(result: CmdResult) -> CmdResult:
    if not result.ok:
        raise CommandFailed(
            f"Command failed ({result.returncode}): {fmt_argv(result.argv)}\n{result.stderr}",
            argv=result.argv,
            result=result,
        )
    return result


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    cwd: str | None = None,
    user: str | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command (after any user switch is applied).
    - Captures stdout/stderr for the outcome report.
    - A timeout raises CommandTimeout, a non-zero exit raises CommandFailed
      when check is set.
    - dry_run logs but does not execute.
    """

    argv_list = as_user(argv, user)
    logger.info("CMD %s%s", fmt_argv(argv_list), f" (cwd={cwd})" if cwd else "")

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise CommandTimeout(
            f"Command timed out after {timeout}s: {fmt_argv(argv_list)}",
            argv=argv_list,
            timeout=float(timeout or 0),
        ) from e
    except OSError as e:
        result = CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))
        raise CommandFailed(f"Command could not start: {fmt_argv(argv_list)}: {e}", argv=argv_list, result=result) from e

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    result = CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)
    if check:
        check_result(result)
    return result
