from __future__ import annotations

import logging
import threading
from typing import List, Optional, Protocol, Sequence

from .context import InstallCtx
from .errors import Cancelled, InstallerError
from .models import (
    STATUS_ALREADY_INSTALLED,
    STATUS_DONE,
    STATUS_FAILED,
    ErrorReport,
    InstallOutcome,
)

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single fail-fast stage.

    `run` returns None to continue, or a reason string to end the run early
    as a success (nothing left to do).
    """

    step_id: str

    def run(self, ctx: InstallCtx) -> Optional[str]:
        ...


def run_pipeline(
    *,
    ctx: InstallCtx,
    steps: Sequence[Step],
    cancel: Optional[threading.Event] = None,
) -> InstallOutcome:
    """Run steps in order; the first failure ends the run."""

    completed: List[str] = []

    for step in steps:
        if cancel is not None and cancel.is_set():
            logger.warning("Cancelled before step %s", step.step_id)
            err = Cancelled(f"cancelled before step {step.step_id}")
            return InstallOutcome(
                status=STATUS_FAILED,
                attempted=bool(completed),
                steps_completed=completed,
                error=ErrorReport.from_exception(err, stage=step.step_id),
                warnings=list(ctx.warnings),
            )

        logger.info("Running step %s", step.step_id)
        try:
            skip_reason = step.run(ctx)
        except InstallerError as e:
            logger.error("Step %s failed: %s", step.step_id, e)
            return InstallOutcome(
                status=STATUS_FAILED,
                attempted=True,
                steps_completed=completed,
                error=ErrorReport.from_exception(e, stage=step.step_id),
                warnings=list(ctx.warnings),
            )

        if skip_reason is not None:
            logger.info("Skipping remaining steps: %s", skip_reason)
            return InstallOutcome(
                status=STATUS_ALREADY_INSTALLED,
                attempted=False,
                skipped_reason=skip_reason,
                warnings=list(ctx.warnings),
            )

        completed.append(step.step_id)

    return InstallOutcome(
        status=STATUS_DONE,
        attempted=True,
        steps_completed=completed,
        warnings=list(ctx.warnings),
    )
