from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path

from ..models import DirectorySpec

logger = logging.getLogger(__name__)


def ensure_directory(spec: DirectorySpec, *, uid: int, gid: int, dry_run: bool = False) -> bool:
    """Make `spec.path` an existing directory with the declared mode and ownership.

    The parent must already exist. Only attributes that are out of spec get
    touched. Returns True if anything changed (or would change in dry_run).
    """

    p = Path(spec.path)
    changed = False

    if p.exists() or p.is_symlink():
        if not p.is_dir():
            raise NotADirectoryError(f"{p} exists and is not a directory")
    else:
        if dry_run:
            logger.info("Would create %s (mode=%o owner=%s group=%s)", p, spec.mode, spec.owner, spec.group)
            return True
        p.mkdir(mode=spec.mode)
        logger.info("Created %s", p)
        changed = True

    st = p.stat()
    if stat.S_IMODE(st.st_mode) != spec.mode:
        if dry_run:
            logger.info("Would chmod %o %s", spec.mode, p)
        else:
            os.chmod(p, spec.mode)
        changed = True

    if st.st_uid != uid or st.st_gid != gid:
        if dry_run:
            logger.info("Would chown %s:%s %s", spec.owner, spec.group, p)
        else:
            os.chown(p, uid, gid)
        changed = True

    return changed


def relocate_tree(src: str | Path, dst: str | Path, *, dry_run: bool = False) -> list[str]:
    """Move every entry of `src` (hidden ones included) into `dst`, then remove `src`.

    Refuses to overwrite: an entry already present in `dst` raises FileExistsError
    before anything has been moved.
    """

    s = Path(src)
    d = Path(dst)
    if dry_run and not s.exists():
        logger.info("Would move entries %s -> %s", s, d)
        return []
    if not s.is_dir():
        raise FileNotFoundError(str(s))

    entries = sorted(s.iterdir(), key=lambda c: c.name)
    clashes = [e.name for e in entries if (d / e.name).exists() or (d / e.name).is_symlink()]
    if clashes:
        raise FileExistsError(f"refusing to overwrite in {d}: {', '.join(clashes)}")

    if dry_run:
        logger.info("Would move %d entries %s -> %s", len(entries), s, d)
        return [e.name for e in entries]

    for entry in entries:
        shutil.move(str(entry), str(d / entry.name))
    s.rmdir()

    logger.info("Moved %d entries %s -> %s", len(entries), s, d)
    return [e.name for e in entries]
