#!/usr/bin/env python3
"""
Client-side validation (Windows)
================================
Aggregating gate for the client half of the lab:
  1. WireGuard adapter is up with an IPv4 address       (11)
  2. Server reachable on TCP/445 through the tunnel     (11)
  3. Drive mapping present and pointing at the share    (10)
  4. Drive root is listable                             (11)

Exit code is the most severe failure seen: 0 ok, 4 generic, 10 map,
11 validation.

Usage:
    python client\\validate_client.py
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from smblab_lib import console, windows
from smblab_lib.config import ClientSettings
from smblab_lib.constants import EC_GENERIC, EC_MAP, EC_VALIDATION, SMB_PORT
from smblab_lib.gate import Gate
from smblab_lib.shell import Shell


def check_tunnel(gate: Gate, shell: Shell, settings: ClientSettings) -> None:
    console.section("1) WireGuard tunnel")
    ip = windows.adapter_ip(windows.ipconfig_adapters(shell), settings.wg_iface)
    if ip:
        gate.ok(f"{settings.wg_iface} is up ({ip})")
    else:
        gate.bad(f"{settings.wg_iface} has no IPv4 address (tunnel down?)", EC_VALIDATION)


def check_port(gate: Gate, shell: Shell, settings: ClientSettings) -> None:
    console.section(f"2) TCP/{SMB_PORT} reachability")
    if windows.port_reachable(shell, settings.host, SMB_PORT):
        gate.ok(f"{settings.host}:{SMB_PORT} reachable")
    else:
        gate.bad(f"{settings.host}:{SMB_PORT} unreachable", EC_VALIDATION)


def check_mapping(gate: Gate, shell: Shell, settings: ClientSettings) -> bool:
    console.section("3) Drive mapping")
    mapping = windows.find_mapping(windows.net_use_list(shell), settings.drive)
    if mapping is None:
        gate.bad(f"{settings.drive} is not mapped", EC_MAP)
        return False
    if mapping["remote"].lower() != settings.unc.lower():
        gate.bad(f"{settings.drive} points at {mapping['remote']}, expected {settings.unc}", EC_MAP)
        return False
    gate.ok(f"{settings.drive} -> {mapping['remote']} ({mapping['status'] or 'no status'})")
    return True


def check_listing(gate: Gate, settings: ClientSettings) -> None:
    console.section("4) Share access")
    if windows.drive_listable(settings.drive):
        gate.ok(f"{settings.drive}\\ is listable")
    else:
        gate.bad(f"{settings.drive}\\ is not listable", EC_VALIDATION)


def main(argv=None, shell=None, env=None) -> int:
    parser = argparse.ArgumentParser(description="Validate the SMB lab from a Windows client")
    parser.add_argument("--drive", help="Drive letter (env: DRIVE_LETTER)")
    parser.add_argument("--verbose", action="store_true", help="Echo every command")
    args = parser.parse_args(argv)

    settings = ClientSettings.from_env(env)
    if args.drive:
        settings.drive_letter = args.drive.rstrip(":").upper()
    shell = shell or Shell(verbose=args.verbose)

    console.bold("== Secure SMB over WireGuard :: Client validation ==")
    if not windows.is_windows():
        console.bad_line("This script must run on the Windows client")
        return EC_GENERIC

    gate = Gate("Client validation")
    try:
        check_tunnel(gate, shell, settings)
        check_port(gate, shell, settings)
        if check_mapping(gate, shell, settings):
            check_listing(gate, settings)
    except Exception as e:
        gate.bad(f"Unexpected error: {e}", EC_GENERIC)
    return gate.summary()


if __name__ == "__main__":
    sys.exit(main())
