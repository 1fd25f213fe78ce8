from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from ..errors import CommandError
from .accounts import Account
from .command import Runner

logger = logging.getLogger(__name__)

ZSH_RE = re.compile(r"zsh")


def path_export_line(bin_dir: str | Path) -> str:
    return f'export PATH="{bin_dir}:$PATH"'


def detect_shell(run: Runner, account: Account, *, timeout: float | None = None) -> str:
    """Best-effort: ask the user's environment for $SHELL, else use the login shell."""

    try:
        r = run(["/bin/sh", "-c", "echo $SHELL"], check=False, user=account.name, timeout=timeout)
        out = r.stdout.strip() if r.returncode == 0 else ""
    except CommandError as e:
        logger.warning("Shell detection failed, using login shell: %s", e)
        out = ""
    return out or account.shell


def profile_for_shell(shell: str, home: str | Path) -> Path:
    name = ".zshrc" if ZSH_RE.search(shell or "") else ".bash_profile"
    return Path(home) / name


def append_line(path: Path, line: str, *, uid: int, gid: int, dry_run: bool = False) -> bool:
    """Append `line` to `path` unless it is already there. Returns True if written.

    The file is compared as bytes; profiles are not always UTF-8.
    """

    created = not path.exists()
    existing = b"" if created else path.read_bytes()
    encoded = line.encode("utf-8")
    if encoded in existing.splitlines():
        logger.info("%s already contains the PATH line", path)
        return False

    if dry_run:
        logger.info("Would append %r to %s", line, path)
        return True

    sep = b"\n" if existing and not existing.endswith(b"\n") else b""
    with path.open("ab") as f:
        f.write(sep + encoded + b"\n")
    if created:
        os.chown(path, uid, gid)

    logger.info("Appended PATH line to %s", path)
    return True
