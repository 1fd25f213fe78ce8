from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import InstallOutcome

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def load_outcome(path: str) -> InstallOutcome:
    p = Path(path)
    fmt = _detect_format(p)
    data: Dict[str, Any]

    if fmt in {"yaml", "yml"}:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(p.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"Outcome report must be an object/dict, got {type(data)}")

    return InstallOutcome.from_dict(data)


def save_outcome(path: str, outcome: InstallOutcome) -> None:
    """Write the outcome report as JSON or YAML, chosen by file extension."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    data = outcome.to_dict()
    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.info("Outcome report written to %s", p)
