"""Point-in-time, read-only capture of the SMB server state."""

import json
import os
import platform
import shutil
import socket
from datetime import datetime
from typing import Optional

from .constants import SMB_CONF, SNAPSHOT_TS_FORMAT


class Capture:
    """Result of one snapshot artifact."""

    def __init__(self, name: str, filename: str, ok: bool, error: Optional[str] = None):
        self.name = name
        self.filename = filename
        self.ok = ok
        self.error = error

    def to_dict(self) -> dict:
        return {"name": self.name, "file": self.filename, "ok": self.ok, "error": self.error}


class Snapshot:
    """Write config, network and ACL dumps into <base_dir>/<timestamp>/."""

    def __init__(self, base_dir: str, plan, smb_conf: str = SMB_CONF,
                 now: Optional[datetime] = None):
        """`plan` is the PermissionPlan whose share tree gets listed and ACL-dumped."""
        self.base_dir = base_dir
        self.plan = plan
        self.smb_conf = smb_conf
        self.now = now or datetime.now()
        self.path = os.path.join(base_dir, self.now.strftime(SNAPSHOT_TS_FORMAT))
        self.captures: list[Capture] = []

    @property
    def share_base(self) -> str:
        return self.plan.base

    @property
    def listing_paths(self) -> list[str]:
        return self.plan.listing_paths

    @property
    def complete(self) -> bool:
        return all(c.ok for c in self.captures)

    def _record(self, name: str, filename: str, ok: bool, error: Optional[str] = None) -> None:
        self.captures.append(Capture(name, filename, ok, error))

    def _write(self, filename: str, text: str) -> None:
        with open(os.path.join(self.path, filename), "w") as f:
            f.write(text)

    def _command(self, shell, name: str, filename: str, args: list[str]) -> None:
        result = shell.run(args)
        self._write(filename, result.stdout)
        if result.ok:
            self._record(name, filename, True)
        else:
            error = result.stderr.strip() or f"exit {result.returncode}"
            self._record(name, filename, False, error)

    def write_meta(self, shell) -> None:
        uptime = shell.run(["uptime", "-p"])
        lines = [
            f"Timestamp: {self.now.astimezone().isoformat(timespec='seconds')}",
            f"Hostname : {socket.gethostname()}",
            f"Kernel   : {platform.release()}",
            f"Uptime   : {uptime.stdout.strip() if uptime.ok else 'unknown'}",
        ]
        self._write("meta.txt", "\n".join(lines) + "\n")
        self._record("meta", "meta.txt", True)

    def copy_config(self) -> None:
        try:
            shutil.copy2(self.smb_conf, os.path.join(self.path, "smb.conf.bak"))
        except OSError as e:
            self._record("smb.conf", "smb.conf.bak", False, str(e))
            return
        self._record("smb.conf", "smb.conf.bak", True)

    def capture(self, shell) -> dict:
        """Run every capture and write manifest.json; returns the manifest."""
        os.makedirs(self.path, exist_ok=True)
        self.write_meta(shell)
        self.copy_config()
        self._command(shell, "testparm", "testparm.txt", ["testparm", "-s"])
        self._command(shell, "listeners", "ss-listeners.txt", ["ss", "-lntp"])
        self._command(shell, "ufw", "ufw.txt", ["ufw", "status", "verbose"])
        self._command(shell, "listing", "ls.txt", ["ls", "-la"] + self.listing_paths)
        self._command(shell, "acl", "acl.txt", ["getfacl", "-R", self.share_base])

        manifest = {
            "timestamp": self.now.isoformat(),
            "path": self.path,
            "complete": self.complete,
            "captures": [c.to_dict() for c in self.captures],
        }
        with open(os.path.join(self.path, "manifest.json"), "w") as f:
            json.dump(manifest, f, indent=2)
        return manifest
