#!/usr/bin/env python3
"""
SMB State Snapshot
==================
Captures a point-in-time snapshot of the SMB server state into
SNAPSHOT_DIR/<YYYY-MM-DD-HHMMSS>/. READ-ONLY: configuration and
permissions are never modified.

Use it before changes, after incidents, or as troubleshooting evidence.

Exit codes:
  0  = every capture succeeded
  1  = not running as root
  20 = partial snapshot (some captures failed; see manifest.json)

Usage:
    sudo python server/snapshot.py
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from smblab_lib import console
from smblab_lib.config import PermSettings, SnapshotSettings
from smblab_lib.console import fail
from smblab_lib.constants import EC_OK, EC_CONFIG, EC_PARTIAL
from smblab_lib.perms import PermissionPlan
from smblab_lib.shell import Shell
from smblab_lib.snapshot import Snapshot


def main(argv=None, shell=None, env=None) -> int:
    parser = argparse.ArgumentParser(description="Read-only SMB server state snapshot")
    parser.add_argument("--output", help="Snapshot base directory (env: SNAPSHOT_DIR)")
    parser.add_argument("--verbose", action="store_true", help="Echo every command")
    args = parser.parse_args(argv)

    settings = SnapshotSettings.from_env(env)
    settings.base_dir = args.output or settings.base_dir
    shell = shell or Shell(verbose=args.verbose)

    if not shell.is_root():
        fail(f"Run as root: sudo {sys.argv[0]}", EC_CONFIG)

    plan = PermissionPlan.from_settings(PermSettings.from_env(env))
    snap = Snapshot(settings.base_dir, plan, settings.smb_conf)
    manifest = snap.capture(shell)

    console.table(
        [[c["name"], c["file"], "OK" if c["ok"] else "FAIL", c["error"] or ""]
         for c in manifest["captures"]],
        headers=["Capture", "File", "Status", "Error"],
    )
    if manifest["complete"]:
        console.ok(f"SMB snapshot saved to {snap.path}")
        return EC_OK
    console.warn(f"Partial SMB snapshot saved to {snap.path}")
    return EC_PARTIAL


if __name__ == "__main__":
    sys.exit(main())
