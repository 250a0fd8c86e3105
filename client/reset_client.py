#!/usr/bin/env python3
"""
Client reset (Windows)
======================
Returns the Windows SMB client to a clean state:
  1. Back up the network ProviderOrder to %ProgramData%\\smb-lab\\
  2. Optionally move LanmanWorkstation to the front (--fix-provider-order)
  3. Delete the lab drive mapping
  4. Flush the DNS resolver cache
  5. Restart the LanmanWorkstation service (needs an elevated prompt)

Exit codes: 0 success, 4 any failure.

Usage:
    python client\\reset_client.py
    python client\\reset_client.py --fix-provider-order
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from smblab_lib import console, windows
from smblab_lib.config import ClientSettings
from smblab_lib.constants import EC_CLIENT_OK, EC_GENERIC, WORKSTATION_SERVICE
from smblab_lib.shell import Shell


def reset_provider_order(shell: Shell, settings: ClientSettings, fix: bool) -> bool:
    console.section("1) Network provider order")
    order = windows.read_provider_order(shell)
    if order is None:
        console.bad_line("Could not read ProviderOrder")
        return False
    console.info(f"ProviderOrder: {','.join(order)}")

    saved, path = windows.backup_provider_order(shell, settings.programdata)
    if not saved:
        console.bad_line(f"ProviderOrder backup failed ({path})")
        return False
    console.ok(f"ProviderOrder backed up to {path}")

    if not fix:
        return True
    wanted = windows.prioritize_provider(order, WORKSTATION_SERVICE)
    if wanted == order:
        console.ok(f"{WORKSTATION_SERVICE} already first")
        return True
    if not windows.write_provider_order(shell, wanted).ok:
        console.bad_line("Failed to write ProviderOrder")
        return False
    console.ok(f"ProviderOrder set to {','.join(wanted)}")
    return True


def reset_mapping(shell: Shell, settings: ClientSettings) -> bool:
    console.section("2) Drive mapping")
    if windows.find_mapping(windows.net_use_list(shell), settings.drive) is None:
        console.ok(f"{settings.drive} not mapped (nothing to remove)")
        return True
    if not windows.net_use_delete(shell, settings.drive).ok:
        console.bad_line(f"Failed to remove {settings.drive}")
        return False
    console.ok(f"{settings.drive} removed")
    return True


def reset_network(shell: Shell) -> bool:
    console.section("3) DNS cache and workstation service")
    if not windows.flush_dns(shell).ok:
        console.bad_line("ipconfig /flushdns failed")
        return False
    console.ok("DNS resolver cache flushed")
    result = windows.restart_workstation(shell)
    if not result.ok:
        console.bad_line(f"Restart-Service {WORKSTATION_SERVICE} failed (elevated prompt?)")
        if result.stderr.strip():
            console.info(result.stderr.strip())
        return False
    console.ok(f"{WORKSTATION_SERVICE} restarted")
    return True


def main(argv=None, shell=None, env=None) -> int:
    parser = argparse.ArgumentParser(description="Reset the Windows SMB client state")
    parser.add_argument("--drive", help="Drive letter (env: DRIVE_LETTER)")
    parser.add_argument("--fix-provider-order", action="store_true",
                        help=f"Move {WORKSTATION_SERVICE} to the front of ProviderOrder")
    parser.add_argument("--verbose", action="store_true", help="Echo every command")
    args = parser.parse_args(argv)

    settings = ClientSettings.from_env(env)
    if args.drive:
        settings.drive_letter = args.drive.rstrip(":").upper()
    shell = shell or Shell(verbose=args.verbose)

    console.bold("== Secure SMB over WireGuard :: Client reset ==")
    if not windows.is_windows():
        console.bad_line("This script must run on the Windows client")
        return EC_GENERIC

    try:
        steps_ok = (reset_provider_order(shell, settings, args.fix_provider_order)
                    and reset_mapping(shell, settings)
                    and reset_network(shell))
    except Exception as e:
        console.bad_line(f"Unexpected error: {e}")
        return EC_GENERIC

    if not steps_ok:
        return EC_GENERIC
    print()
    console.ok("Client reset complete")
    return EC_CLIENT_OK


if __name__ == "__main__":
    sys.exit(main())
