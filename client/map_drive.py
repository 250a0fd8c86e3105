#!/usr/bin/env python3
"""
Map the lab share over the WireGuard tunnel (Windows client)
============================================================
  1. Remove any stale mapping on the drive letter
  2. net use <letter>: \\\\<host>\\<share>
  3. Confirm the drive root is listable

Exit codes (client contract):
  0  = mapped and reachable
  4  = generic failure (not Windows, `net` missing, unexpected error)
  10 = map failure (net use)
  11 = validation failure (mapped but not listable)

Usage:
    python client\\map_drive.py
    python client\\map_drive.py --drive Y --host 10.8.0.1 --share Public
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from smblab_lib import console, windows
from smblab_lib.config import ClientSettings
from smblab_lib.constants import EC_CLIENT_OK, EC_GENERIC, EC_MAP, EC_VALIDATION
from smblab_lib.shell import Shell


def map_drive(shell: Shell, settings: ClientSettings, persistent: bool = False) -> int:
    drive, unc = settings.drive, settings.unc

    existing = windows.find_mapping(windows.net_use_list(shell), drive)
    if existing:
        console.info(f"Removing existing mapping {drive} -> {existing['remote']}")
        windows.net_use_delete(shell, drive)

    console.info(f"Mapping {drive} -> {unc}")
    result = windows.net_use_map(shell, drive, unc, settings.user, settings.password,
                                 persistent=persistent)
    if not result.ok:
        console.bad_line(f"net use failed (exit {result.returncode})")
        if result.stderr.strip():
            console.info(result.stderr.strip())
        console.info("Check: tunnel up, server reachable on 445, credentials valid.")
        return EC_MAP
    console.ok(f"{drive} mapped to {unc}")

    if not windows.drive_listable(drive):
        console.bad_line(f"{drive} mapped but the share root is not listable")
        return EC_VALIDATION
    console.ok(f"{drive}\\ is listable")
    return EC_CLIENT_OK


def main(argv=None, shell=None, env=None) -> int:
    parser = argparse.ArgumentParser(description="Map the SMB lab share on a Windows client")
    parser.add_argument("--drive", help="Drive letter (env: DRIVE_LETTER)")
    parser.add_argument("--host", help="Server address inside the tunnel (env: SMB_HOST)")
    parser.add_argument("--share", help="Share name (env: SMB_SHARE)")
    parser.add_argument("--user", help="SMB user (env: SMB_USER)")
    parser.add_argument("--persistent", action="store_true", help="Remember the mapping across logons")
    parser.add_argument("--verbose", action="store_true", help="Echo every command")
    args = parser.parse_args(argv)

    settings = ClientSettings.from_env(env)
    if args.drive:
        settings.drive_letter = args.drive.rstrip(":").upper()
    settings.host = args.host or settings.host
    settings.share = args.share or settings.share
    settings.user = args.user or settings.user
    shell = shell or Shell(verbose=args.verbose)

    console.bold("== Secure SMB over WireGuard :: Map drive ==")
    if not windows.is_windows():
        console.bad_line("This script must run on the Windows client")
        return EC_GENERIC
    if not shell.have("net"):
        console.bad_line("Missing dependency: net")
        return EC_GENERIC

    try:
        return map_drive(shell, settings, persistent=args.persistent)
    except Exception as e:
        console.bad_line(f"Unexpected error: {e}")
        return EC_GENERIC


if __name__ == "__main__":
    sys.exit(main())
