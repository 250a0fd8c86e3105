#!/usr/bin/env python3
"""
Secure SMB over WireGuard - server-side demo entrypoint
=======================================================
Fail-fast walk through the server gates: the first failing check exits
with its code.

Exit codes (shared contract):
  0 = healthy
  1 = server config invalid
  2 = 445 not scoped to VPN (security regression)
  3 = local smbclient fails (server functional fail)

Usage:
    python server/run_demo.py
    VPN_SUBNET=10.8.0.0/24 SMBCLIENT_PASS=secret python server/run_demo.py
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from smblab_lib import console, samba, ufw
from smblab_lib.config import ServerSettings
from smblab_lib.console import fail
from smblab_lib.constants import (
    EC_OK, EC_CONFIG, EC_BOUNDARY, EC_FUNCTIONAL, SMB_PORT,
)
from smblab_lib.shell import Shell


def check_dependencies(shell: Shell) -> None:
    for cmd in ("testparm", "ss", "smbclient"):
        if not shell.have(cmd):
            fail(f"Missing dependency: {cmd}", EC_CONFIG)
    if not shell.have("ufw"):
        fail("ufw not installed — cannot verify VPN-only boundary enforcement", EC_BOUNDARY)


def check_config(shell: Shell) -> None:
    print("-- Checking Samba configuration --")
    if not samba.testparm_ok(shell):
        fail("Samba configuration invalid (testparm failed)", EC_CONFIG)
    console.ok("Samba configuration parses cleanly")


def check_listening(shell: Shell) -> None:
    print(f"\n-- Checking smbd listening on TCP/{SMB_PORT} --")
    listening, _ = samba.listening_on(shell, SMB_PORT)
    if not listening:
        fail(f"smbd is not listening on TCP/{SMB_PORT}", EC_CONFIG)
    console.ok(f"smbd is listening on TCP/{SMB_PORT}")


def check_boundary(shell: Shell, subnet: str) -> None:
    print(f"\n-- Checking VPN-only boundary for TCP/{SMB_PORT} --")
    _, text = ufw.status_text(shell)
    problem = ufw.evaluate_boundary(ufw.UfwStatus.parse(text), subnet, SMB_PORT)
    if problem:
        fail(problem, EC_BOUNDARY)
    console.ok(f"TCP/{SMB_PORT} correctly scoped to VPN boundary")


def check_functional(shell: Shell, settings: ServerSettings) -> None:
    print("\n-- Running local SMB functional test --")
    if settings.password is None:
        console.info("SMBCLIENT_PASS not set — interactive prompt expected")
    if not samba.smbclient_ls(shell, settings.host, settings.share, settings.user,
                              settings.password):
        fail("Local smbclient test failed (server functional failure)", EC_FUNCTIONAL)
    console.ok("Local SMB access works (server functional)")


def main(argv=None, shell=None, env=None) -> int:
    parser = argparse.ArgumentParser(description="Server-side SMB over WireGuard demo")
    parser.add_argument("--vpn-subnet", help="Expected VPN source subnet (env: VPN_SUBNET)")
    parser.add_argument("--verbose", action="store_true", help="Echo every command")
    args = parser.parse_args(argv)

    settings = ServerSettings.from_env(env)
    settings.vpn_subnet = args.vpn_subnet or settings.vpn_subnet
    shell = shell or Shell(verbose=args.verbose)

    print("== Secure SMB over WireGuard :: Server-side demo ==")
    print("Scope: Samba config, service state, local SMB, VPN boundary")
    print()

    check_dependencies(shell)
    check_config(shell)
    check_listening(shell)
    check_boundary(shell, settings.vpn_subnet)
    check_functional(shell, settings)

    print()
    console.ok("Server is healthy and ready for client-side validation")
    return EC_OK


if __name__ == "__main__":
    sys.exit(main())
