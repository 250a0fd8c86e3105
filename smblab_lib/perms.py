"""Ownership and mode alignment for the Samba share trees.

Every parent on the path to a share must carry the traversal (x) bit;
without it SMB authentication succeeds but access to the share fails.
Errors from chmod/chown are raised, never silenced.
"""

import grp
import os
import pwd
import shutil
import stat

from .constants import (
    TRAVERSAL_MODE, PUBLIC_DIR_MODE, PUBLIC_FILE_MODE,
    DIRECTION_DIR_MODE, DIRECTION_FILE_MODE,
)


class PermissionPlan:
    """Where the shares live, who owns them and which modes they get."""

    def __init__(self, base: str, public: str, direction: str,
                 user: str, group: str):
        self.base = base.rstrip("/") or "/"
        self.public = public
        self.direction = direction
        self.user = user
        self.group = group

    @classmethod
    def from_settings(cls, settings) -> "PermissionPlan":
        return cls(settings.base, settings.public, settings.direction,
                   settings.user, settings.group)

    @property
    def parent(self) -> str:
        return os.path.dirname(self.base) or "/"

    @property
    def public_path(self) -> str:
        return os.path.join(self.base, self.public)

    @property
    def direction_path(self) -> str:
        return os.path.join(self.base, self.direction)

    @property
    def trees(self) -> list[tuple[str, int, int]]:
        """(root, dir_mode, file_mode) for each share tree."""
        return [
            (self.public_path, PUBLIC_DIR_MODE, PUBLIC_FILE_MODE),
            (self.direction_path, DIRECTION_DIR_MODE, DIRECTION_FILE_MODE),
        ]

    @property
    def listing_paths(self) -> list[str]:
        return [self.parent, self.base, self.public_path, self.direction_path]

    def steps(self) -> list[str]:
        """Human-readable description of what align_permissions will do."""
        lines = [
            f"mkdir -p {self.public_path} {self.direction_path}",
            f"chmod {TRAVERSAL_MODE:o} {self.parent}",
            f"chmod {TRAVERSAL_MODE:o} {self.base}",
            f"chown -R {self.user}:{self.group} {self.public_path} {self.direction_path}",
        ]
        for root, dir_mode, file_mode in self.trees:
            lines.append(f"dirs under {root} -> {dir_mode:o}, files -> {file_mode:o}")
        return lines


def _raise(err: OSError) -> None:
    # os.walk skips unreadable subtrees unless told otherwise
    raise err


def _chown_tree(root: str, user: str, group: str) -> None:
    shutil.chown(root, user, group)
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        for name in dirnames + filenames:
            path = os.path.join(dirpath, name)
            if not os.path.islink(path):
                shutil.chown(path, user, group)


def _chmod_tree(root: str, dir_mode: int, file_mode: int) -> None:
    os.chmod(root, dir_mode)
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        for name in dirnames:
            path = os.path.join(dirpath, name)
            if not os.path.islink(path):
                os.chmod(path, dir_mode)
        for name in filenames:
            path = os.path.join(dirpath, name)
            if not os.path.islink(path):
                os.chmod(path, file_mode)


def align_permissions(plan: PermissionPlan, chown: bool = True) -> list[str]:
    """Create the share directories and align ownership and modes.

    Returns the share roots that were aligned.
    """
    os.makedirs(plan.public_path, exist_ok=True)
    os.makedirs(plan.direction_path, exist_ok=True)

    os.chmod(plan.parent, TRAVERSAL_MODE)
    os.chmod(plan.base, TRAVERSAL_MODE)

    roots = []
    for root, dir_mode, file_mode in plan.trees:
        if chown:
            _chown_tree(root, plan.user, plan.group)
        _chmod_tree(root, dir_mode, file_mode)
        roots.append(root)
    return roots


def _owner_name(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def _group_name(gid: int) -> str:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


def describe(paths: list[str]) -> list[list[str]]:
    """`ls -ld`-style rows: mode, owner, group, path."""
    rows = []
    for path in paths:
        try:
            st = os.stat(path)
        except FileNotFoundError:
            rows.append(["missing", "-", "-", path])
            continue
        rows.append([stat.filemode(st.st_mode), _owner_name(st.st_uid),
                     _group_name(st.st_gid), path])
    return rows
