#!/usr/bin/env python3
"""
SMB Lab Validation (server side)
================================
Verifies:
  1. Dependencies (testparm, ss, smbclient; ufw is informational)
  2. Samba config parses (testparm -s)
  3. smbd is listening on TCP/445
  4. Local functional test via smbclient
  5. Firewall posture (ufw status, visibility only)
  6. Share permissions (visibility only)

Exit codes (shared with reset_smb.py / run_demo.py):
  0 = healthy
  1 = server config invalid
  2 = security boundary violation
  3 = server functional failure (local smbclient)

Usage:
    python server/validate.py
    SMBCLIENT_PASS=secret python server/validate.py --verbose
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from smblab_lib import console, perms, samba, ufw
from smblab_lib.config import PermSettings, ServerSettings
from smblab_lib.constants import EC_CONFIG, EC_FUNCTIONAL, SMB_PORT
from smblab_lib.gate import Gate
from smblab_lib.shell import Shell


def check_dependencies(gate: Gate, shell: Shell) -> None:
    console.section("1) Dependencies")
    for cmd in ("testparm", "ss", "smbclient"):
        gate.need_cmd(shell, cmd)
    if shell.have("ufw"):
        gate.ok("ufw present")
    else:
        console.info("ufw not installed (firewall visibility skipped)")


def check_config(gate: Gate, shell: Shell) -> None:
    console.section("2) Samba config parses")
    if samba.testparm_ok(shell):
        gate.ok("testparm -s parsed smb.conf (no fatal errors)")
    else:
        gate.bad("testparm -s failed (smb.conf parse error)", EC_CONFIG)
        console.info("Run: sudo testparm -s  (to see exact error)")


def check_listening(gate: Gate, shell: Shell) -> None:
    console.section(f"3) SMB service listening (TCP/{SMB_PORT})")
    listening, lines = samba.listening_on(shell, SMB_PORT)
    if listening:
        gate.ok(f"Port {SMB_PORT} is listening")
        for line in lines:
            print(line)
    else:
        gate.bad(f"Port {SMB_PORT} not listening (smbd down or misbound)", EC_CONFIG)
        console.info("Run: sudo systemctl status smbd --no-pager")


def check_functional(gate: Gate, shell: Shell, settings: ServerSettings) -> None:
    console.section("4) Local SMB functional test (localhost)")
    if settings.password is None:
        console.info("SMBCLIENT_PASS not provided — prompting interactively.")
    if samba.smbclient_ls(shell, settings.host, settings.share, settings.user,
                          settings.password):
        gate.ok("smbclient localhost test succeeded (ls)")
        return
    gate.bad("smbclient localhost test failed (functional failure)", EC_FUNCTIONAL)
    if settings.password is None:
        console.info("Check: share exists, user exists, traversal bits, ownership.")
    else:
        console.info(f"Try manually: smbclient {settings.unc} -U {settings.user}")


def show_firewall(gate: Gate, shell: Shell) -> None:
    console.section("5) Firewall posture (visibility only)")
    if not shell.have("ufw"):
        console.info("Skipping UFW (not installed).")
        return
    console.info("UFW status (should reflect VPN-only intent):")
    _, text = ufw.status_text(shell)
    if text:
        print(text.rstrip())
    gate.ok("UFW status displayed")


def show_permissions(gate: Gate, plan: perms.PermissionPlan) -> None:
    console.section("6) Permissions visibility (non-enforcing)")
    rows = perms.describe(plan.listing_paths)
    for row in rows:
        if row[0] == "missing":
            console.info(f"Path missing (ok if unused): {row[3]}")
    console.table([r for r in rows if r[0] != "missing"],
                  headers=["Mode", "Owner", "Group", "Path"])
    gate.ok("Permissions visibility printed")


def main(argv=None, shell=None, env=None) -> int:
    parser = argparse.ArgumentParser(description="SMB lab server-side validation gate")
    parser.add_argument("--share", help="Share name (env: SMB_SHARE)")
    parser.add_argument("--user", help="SMB user (env: SMB_USER)")
    parser.add_argument("--host", help="SMB host for the local test (env: SMB_HOST)")
    parser.add_argument("--verbose", action="store_true", help="Echo every command")
    args = parser.parse_args(argv)

    settings = ServerSettings.from_env(env)
    settings.share = args.share or settings.share
    settings.user = args.user or settings.user
    settings.host = args.host or settings.host
    shell = shell or Shell(verbose=args.verbose)

    console.bold("== SMB Lab Validation (server side) ==")
    gate = Gate("Validation")
    check_dependencies(gate, shell)
    check_config(gate, shell)
    check_listening(gate, shell)
    check_functional(gate, shell, settings)
    show_firewall(gate, shell)
    show_permissions(gate, perms.PermissionPlan.from_settings(PermSettings.from_env(env)))
    return gate.summary()


if __name__ == "__main__":
    sys.exit(main())
