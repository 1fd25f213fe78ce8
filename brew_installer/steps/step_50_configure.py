from __future__ import annotations

import logging
from typing import Optional

from ..context import InstallCtx
from ..errors import CommandError, LinkFailed, PostInstallCommandFailed, ShellProfileWriteFailed
from ..lib.shell import append_line, detect_shell, path_export_line, profile_for_shell

logger = logging.getLogger(__name__)


class ConfigureStep:
    step_id = "configure"

    def run(self, ctx: InstallCtx) -> Optional[str]:
        repo = ctx.repo_dir

        try:
            ctx.run(["git", "config", "core.autocrlf", "false"], cwd=repo, user=ctx.user)
        except CommandError as e:
            raise PostInstallCommandFailed(f"git config failed: {e}", stage=self.step_id, cause=e) from e

        try:
            ctx.run(["ln", "-sf", str(repo / "bin" / "brew"), str(ctx.marker_path)], cwd=repo, user=ctx.user)
        except CommandError as e:
            raise LinkFailed(f"could not link {ctx.marker_path}: {e}", stage=self.step_id, cause=e) from e

        try:
            ctx.run(
                [str(ctx.marker_path), "update", "--force"],
                cwd=repo,
                user=ctx.user,
                timeout=ctx.cfg.download_timeout,
            )
        except CommandError as e:
            raise PostInstallCommandFailed(f"brew update failed: {e}", stage=self.step_id, cause=e) from e

        try:
            self._update_shell_profile(ctx)
        except ShellProfileWriteFailed as e:
            logger.warning("%s", e)
            ctx.warnings.append(f"{e.kind}: {e}")
        return None

    def _update_shell_profile(self, ctx: InstallCtx) -> None:
        shell = detect_shell(ctx.run, ctx.account)
        profile = profile_for_shell(shell, ctx.home)
        logger.info("Detected shell %r; using %s", shell, profile)
        try:
            append_line(
                profile,
                path_export_line(ctx.cfg.bin_dir),
                uid=ctx.account.uid,
                gid=ctx.account.gid,
                dry_run=ctx.dry_run,
            )
        except (OSError, UnicodeError) as e:
            raise ShellProfileWriteFailed(f"could not update {profile}: {e}", stage=self.step_id, cause=e) from e
