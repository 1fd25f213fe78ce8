from __future__ import annotations

import logging
from typing import Optional

from ..context import InstallCtx
from ..errors import DirectoryProvisionFailed
from ..lib.accounts import lookup_group_id
from ..lib.dirs import ensure_directory

logger = logging.getLogger(__name__)


class ProvisionDirectoriesStep:
    step_id = "provision"

    def run(self, ctx: InstallCtx) -> Optional[str]:
        try:
            gid = lookup_group_id(ctx.cfg.group)
        except KeyError as e:
            raise DirectoryProvisionFailed(
                f"group {ctx.cfg.group!r} does not exist", stage=self.step_id, cause=e
            ) from e

        changed = 0
        for spec in [*ctx.system_directories(), *ctx.user_directories()]:
            try:
                if ensure_directory(spec, uid=ctx.account.uid, gid=gid, dry_run=ctx.dry_run):
                    changed += 1
            except OSError as e:
                raise DirectoryProvisionFailed(
                    f"could not provision {spec.path}: {e}", stage=self.step_id, cause=e
                ) from e

        logger.info("Directories provisioned (%d changed)", changed)
        return None
