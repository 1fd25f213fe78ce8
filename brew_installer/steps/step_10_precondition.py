from __future__ import annotations

import logging
from typing import Optional

from ..context import InstallCtx

logger = logging.getLogger(__name__)


class PreconditionStep:
    step_id = "precondition"

    def run(self, ctx: InstallCtx) -> Optional[str]:
        marker = ctx.marker_path
        # A dangling link still means a previous install put it there.
        if marker.exists() or marker.is_symlink():
            logger.info("Homebrew already installed (%s present)", marker)
            return f"{marker} already exists"

        logger.info("%s not present; installing", marker)
        return None
