from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Sequence

from ..errors import CommandError
from .command import Runner
from .net import download

logger = logging.getLogger(__name__)

CLT_LABEL_RE = re.compile(r"^\s*\*\s*(?:Label:\s*)?(.*Command Line Tools.*?)\s*$", re.MULTILINE)


def _version_key(label: str) -> tuple[int, ...]:
    return tuple(int(n) for n in re.findall(r"\d+", label))


def pick_clt_label(softwareupdate_output: str) -> Optional[str]:
    """Return the newest Command Line Tools label offered by `softwareupdate --list`."""

    labels = CLT_LABEL_RE.findall(softwareupdate_output)
    if not labels:
        return None
    return max(labels, key=_version_key)


def upgrade_command_line_tools(
    run: Runner,
    *,
    placeholder: Path,
    timeout: float | None = None,
    dry_run: bool = False,
) -> Optional[str]:
    """Install or upgrade the Xcode Command Line Tools through softwareupdate.

    The placeholder file makes softwareupdate list the CLT package even when
    nothing has asked for it yet. Returns the installed label, or None if no
    update was offered.
    """

    if dry_run:
        logger.info("Would touch %s", placeholder)
    else:
        placeholder.touch()
    try:
        listing = run(["softwareupdate", "--list"], timeout=timeout)
        label = pick_clt_label(listing.stdout + "\n" + listing.stderr)
        if label is None:
            logger.info("No Command Line Tools update offered; treating as current")
            return None
        run(["softwareupdate", "--install", label, "--verbose"], timeout=timeout)
        logger.info("Command Line Tools installed: %s", label)
        return label
    finally:
        if not dry_run:
            placeholder.unlink(missing_ok=True)


def install_pkg_from_dmg(
    run: Runner,
    *,
    url: str,
    pkg_name: str,
    work_dir: Path,
    timeout: float | None = None,
    download_timeout: float | None = None,
    dry_run: bool = False,
) -> None:
    """Download a disk image, install one .pkg from it, and detach it again."""

    dmg = work_dir / "tools.dmg"
    mountpoint = work_dir / "mnt"

    download(run, url, dmg, timeout=download_timeout)
    if not dry_run:
        mountpoint.mkdir(parents=True, exist_ok=True)

    run(
        ["hdiutil", "attach", str(dmg), "-nobrowse", "-readonly", "-mountpoint", str(mountpoint)],
        timeout=timeout,
    )
    try:
        pkg = mountpoint / pkg_name
        if not dry_run and not pkg.exists():
            raise FileNotFoundError(f"{pkg_name!r} not found in disk image {url}")
        run(["installer", "-pkg", str(pkg), "-target", "/"], timeout=timeout)
    finally:
        _detach(run, mountpoint, timeout=timeout)


def _detach(run: Runner, mountpoint: Path, *, timeout: float | None) -> None:
    argv: Sequence[str] = ["hdiutil", "detach", str(mountpoint), "-quiet"]
    try:
        r = run(argv, check=False, timeout=timeout)
    except CommandError as e:
        logger.warning("Could not detach %s: %s", mountpoint, e)
        return
    if r.returncode != 0:
        logger.warning("Could not detach %s (%s): %s", mountpoint, r.returncode, r.stderr.strip())
