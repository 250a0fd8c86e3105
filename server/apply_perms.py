#!/usr/bin/env python3
"""
Apply Permission Alignment
==========================
Ensures parent traversal and sane share permissions for the Samba shares
under BASE (default /srv/samba/{public,direction}):

  - parent of BASE and BASE itself: 755 (traversal)
  - ownership: SMB_USER:SMB_GROUP, recursive
  - public:    dirs 775, files 664 (group-writable)
  - direction: dirs 770, files 660 (tighter access)

Usage:
    sudo python server/apply_perms.py
    python server/apply_perms.py --dry-run
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from smblab_lib import console, perms
from smblab_lib.config import PermSettings
from smblab_lib.console import fail
from smblab_lib.constants import EC_OK, EC_CONFIG
from smblab_lib.shell import Shell


def main(argv=None, shell=None, env=None) -> int:
    parser = argparse.ArgumentParser(description="Align ownership and modes of the Samba shares")
    parser.add_argument("--base", help="Share base directory (env: BASE)")
    parser.add_argument("--dry-run", action="store_true", help="Print the plan without changing anything")
    parser.add_argument("--verbose", action="store_true", help="Echo every step before applying it")
    args = parser.parse_args(argv)

    settings = PermSettings.from_env(env)
    settings.base = args.base or settings.base
    plan = perms.PermissionPlan.from_settings(settings)
    shell = shell or Shell(verbose=args.verbose)

    if args.dry_run:
        console.bold("== Permission alignment plan (dry run) ==")
        for step in plan.steps():
            console.info(step)
        return EC_OK

    if not shell.is_root():
        fail(f"run as root (sudo {sys.argv[0]})", EC_CONFIG)

    if args.verbose:
        for step in plan.steps():
            console.dim(f"$ {step}")

    try:
        perms.align_permissions(plan)
    except (OSError, LookupError) as e:
        fail(f"Permission alignment failed: {e}", EC_CONFIG)

    print()
    console.bold("Permission alignment complete. Current state:")
    console.table(perms.describe(plan.listing_paths),
                  headers=["Mode", "Owner", "Group", "Path"])
    print()
    console.ok(f"ownership and mode bits aligned under {plan.base}")
    return EC_OK


if __name__ == "__main__":
    sys.exit(main())
