from __future__ import annotations

import logging
from pathlib import Path

from .command import CmdResult, Runner

logger = logging.getLogger(__name__)


def download(
    run: Runner,
    url: str,
    dest: str | Path,
    *,
    user: str | None = None,
    cwd: str | None = None,
    timeout: float | None = None,
) -> CmdResult:
    """Fetch `url` into `dest` with curl; HTTP errors count as failures."""

    logger.info("Downloading %s -> %s", url, dest)
    return run(["curl", "-fsSL", url, "-o", str(dest)], user=user, cwd=cwd, timeout=timeout)
