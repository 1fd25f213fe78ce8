from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .lib.env import DIRECTORY_GROUP, DIRECTORY_MODE, PATHS, UPSTREAM

DEFAULT_COMMAND_TIMEOUT = 600.0
DEFAULT_DOWNLOAD_TIMEOUT = 1800.0


@dataclass(frozen=True)
class InstallerConfig:
    """Injected constants for one run: endpoints, paths and timeouts.

    Every value has a default matching a stock macOS Homebrew install, so an
    empty mapping is a valid config.
    """

    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def prefix(self) -> Path:
        return Path(str(self.raw.get("prefix") or PATHS.prefix))

    @property
    def group(self) -> str:
        return str(self.raw.get("group") or DIRECTORY_GROUP)

    @property
    def directory_mode(self) -> int:
        mode = self.raw.get("directory_mode", DIRECTORY_MODE)
        # YAML users tend to write "0755".
        return int(mode, 8) if isinstance(mode, str) else int(mode)

    @property
    def archive_url(self) -> str:
        return str(self.raw.get("archive_url") or UPSTREAM.archive_url)

    @property
    def archive_name(self) -> str:
        return str(self.raw.get("archive_name") or UPSTREAM.archive_name)

    @property
    def archive_root(self) -> str:
        return str(self.raw.get("archive_root") or UPSTREAM.archive_root)

    @property
    def clt_placeholder(self) -> Path:
        return Path(str(self.raw.get("clt_placeholder") or PATHS.clt_placeholder))

    @property
    def command_timeout(self) -> float:
        return float(self.raw.get("command_timeout") or DEFAULT_COMMAND_TIMEOUT)

    @property
    def download_timeout(self) -> float:
        return float(self.raw.get("download_timeout") or DEFAULT_DOWNLOAD_TIMEOUT)

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def repo_dir(self) -> Path:
        return self.prefix / "Homebrew"

    @property
    def bin_dir(self) -> Path:
        return self.prefix / "bin"

    @property
    def marker_path(self) -> Path:
        return self.bin_dir / "brew"

    def with_overrides(self, **overrides: Any) -> "InstallerConfig":
        raw = dict(self.raw)
        raw.update({k: v for k, v in overrides.items() if v is not None})
        return InstallerConfig(raw=raw)


def load_config(path: Optional[str]) -> InstallerConfig:
    if not path:
        return InstallerConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    return InstallerConfig(raw=raw)
