from __future__ import annotations

import logging
from typing import Optional

from ..context import InstallCtx
from ..errors import CommandError, DownloadFailed, RelocateFailed, UnpackFailed
from ..lib.dirs import relocate_tree
from ..lib.net import download

logger = logging.getLogger(__name__)


class FetchAndRelocateStep:
    """Unpack the Homebrew source into <prefix>/Homebrew.

    Download and unpack run as the target user; the move runs as the invoking
    (privileged) process so it is not blocked by ownership set during unpack.
    """

    step_id = "fetch_relocate"

    def run(self, ctx: InstallCtx) -> Optional[str]:
        cfg = ctx.cfg
        repo = ctx.repo_dir
        archive = repo / cfg.archive_name

        try:
            ctx.run(["git", "init", "-q"], cwd=repo, user=ctx.user)
            download(ctx.run, cfg.archive_url, archive, user=ctx.user, cwd=str(repo), timeout=cfg.download_timeout)
        except CommandError as e:
            raise DownloadFailed(f"could not fetch {cfg.archive_url}: {e}", stage=self.step_id, cause=e) from e

        try:
            ctx.run(["unzip", "-q", "-o", str(archive), "-d", str(repo)], cwd=repo, user=ctx.user)
        except CommandError as e:
            raise UnpackFailed(f"could not unpack {archive}: {e}", stage=self.step_id, cause=e) from e

        unpacked = repo / cfg.archive_root
        if not ctx.dry_run and not unpacked.is_dir():
            raise UnpackFailed(f"{archive} did not produce {unpacked}", stage=self.step_id)

        try:
            relocate_tree(unpacked, repo, dry_run=ctx.dry_run)
            if not ctx.dry_run:
                archive.unlink(missing_ok=True)
        except OSError as e:
            raise RelocateFailed(f"could not move {unpacked} into {repo}: {e}", stage=self.step_id, cause=e) from e

        logger.info("Homebrew unpacked into %s", repo)
        return None
