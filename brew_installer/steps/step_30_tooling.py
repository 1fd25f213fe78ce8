from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Optional

from ..context import InstallCtx
from ..errors import CommandError, ToolingInstallFailed
from ..lib.tools import install_pkg_from_dmg, upgrade_command_line_tools

logger = logging.getLogger(__name__)


class InstallToolingStep:
    """Command Line Tools for Xcode, from a provided dmg or via softwareupdate."""

    step_id = "tooling"

    def run(self, ctx: InstallCtx) -> Optional[str]:
        req = ctx.request
        try:
            if req.tools_url:
                with tempfile.TemporaryDirectory(prefix="brew-installer-") as work:
                    install_pkg_from_dmg(
                        ctx.run,
                        url=req.tools_url,
                        pkg_name=str(req.tools_pkg_name),
                        work_dir=Path(work),
                        download_timeout=ctx.cfg.download_timeout,
                        dry_run=ctx.dry_run,
                    )
                logger.info("Installed %s from %s", req.tools_pkg_name, req.tools_url)
            else:
                upgrade_command_line_tools(
                    ctx.run,
                    placeholder=ctx.cfg.clt_placeholder,
                    timeout=ctx.cfg.download_timeout,
                    dry_run=ctx.dry_run,
                )
        except (CommandError, OSError) as e:
            raise ToolingInstallFailed(
                f"developer tools installation failed: {e}", stage=self.step_id, cause=e
            ) from e
        return None
