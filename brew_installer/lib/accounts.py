from __future__ import annotations

import grp
import logging
import pwd
from dataclasses import dataclass

from ..errors import InvalidRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Account:
    name: str
    uid: int
    gid: int
    home: str
    shell: str


def lookup_account(name: str) -> Account:
    """Resolve a local account, refusing the superuser."""

    try:
        pw = pwd.getpwnam(name)
    except KeyError as e:
        raise InvalidRequest(f"user {name!r} does not exist on this host") from e

    if pw.pw_uid == 0:
        raise InvalidRequest(f"user {name!r} is the superuser; Homebrew cannot be installed as root")

    return Account(name=pw.pw_name, uid=pw.pw_uid, gid=pw.pw_gid, home=pw.pw_dir, shell=pw.pw_shell)


def lookup_group_id(name: str) -> int:
    return grp.getgrnam(name).gr_gid
