from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Paths:
    prefix: str = "/usr/local"
    log_default: str = "/var/log/brew-installer.log"
    clt_placeholder: str = "/tmp/.com.apple.dt.CommandLineTools.installondemand.in-progress"


@dataclass(frozen=True)
class Upstream:
    brew_source: str = "https://github.com/Homebrew/brew/tarball/master"
    archive_url: str = "https://codeload.github.com/Homebrew/brew/zip/master"
    archive_name: str = "brew-master.zip"
    archive_root: str = "brew-master"


PATHS = Paths()
UPSTREAM = Upstream()

# Relative to the prefix; parents come before children.
SYSTEM_DIRECTORIES: Tuple[str, ...] = (
    "bin",
    "etc",
    "include",
    "lib",
    "sbin",
    "share",
    "var",
    "opt",
    "share/zsh",
    "share/zsh/site-functions",
    "var/homebrew",
    "var/homebrew/linked",
    "Cellar",
    "Caskroom",
    "Homebrew",
    "Frameworks",
)

# Relative to the user's home; "" is the home directory itself.
USER_DIRECTORIES: Tuple[str, ...] = (
    "",
    "Library",
    "Library/Caches",
    "Library/Caches/Homebrew",
)

DIRECTORY_MODE = 0o755
DIRECTORY_GROUP = "admin"
