#!/usr/bin/env python3
"""
Secure SMB over WireGuard - UFW rule applier
============================================
Applies ONLY the inbound SMB rule(s) needed for SMB over WireGuard, reloads
UFW and prints an audit-friendly status. Unrelated SSH/HTTP/HTTPS rules are
left alone. Running it twice is safe, though UFW may keep duplicates when
rule comments differ.

Environment:
    WG_IFACE=wg0-client
    WG_SUBNET_V4=10.8.0.0/24   # scope the v4 rule to this source subnet
    ENABLE_V6=1                # add the v6 rule when UFW IPv6 is enabled

Usage:
    sudo python server/set_ufw_rules.py
    python server/set_ufw_rules.py --dry-run
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from smblab_lib import console, ufw
from smblab_lib.config import UfwSettings
from smblab_lib.console import fail
from smblab_lib.constants import (
    EC_OK, EC_CONFIG, SMB_PORT, UFW_RULE_COMMENT, UFW_RULE_COMMENT_V6,
)
from smblab_lib.shell import Shell


def apply_v4_rule(shell: Shell, settings: UfwSettings) -> bool:
    if settings.subnet_v4:
        console.info(f"IPv4: allow TCP/{SMB_PORT} inbound on {settings.iface} "
                     f"from {settings.subnet_v4}")
    else:
        console.info(f"IPv4: allow TCP/{SMB_PORT} inbound on {settings.iface} (source: Anywhere)")
    rule = ufw.build_allow_rule(settings.iface, SMB_PORT, settings.subnet_v4, UFW_RULE_COMMENT)
    return shell.run(rule).ok


def apply_v6_rule(shell: Shell, settings: UfwSettings, v6_enabled: bool) -> bool:
    """Add the v6 rule; skipping it (disabled or unsupported) is not a failure."""
    if not settings.enable_v6:
        console.info("IPv6: skipped (ENABLE_V6=0)")
        return True
    if not v6_enabled:
        console.warn("IPv6: skipped — UFW IPv6 is disabled "
                     "(set IPV6=yes in /etc/default/ufw and reload UFW)")
        return True
    console.info(f"IPv6: allow TCP/{SMB_PORT} inbound on {settings.iface} "
                 "(requires UFW IPv6 enabled)")
    rule = ufw.build_allow_rule(settings.iface, SMB_PORT, None, UFW_RULE_COMMENT_V6)
    return shell.run(rule).ok


def main(argv=None, shell=None, env=None, ufw_defaults=None) -> int:
    parser = argparse.ArgumentParser(description="Apply the SMB-over-WireGuard UFW rule")
    parser.add_argument("--iface", help="WireGuard interface (env: WG_IFACE)")
    parser.add_argument("--subnet", help="IPv4 source subnet (env: WG_SUBNET_V4)")
    parser.add_argument("--no-v6", action="store_true", help="Skip the IPv6 rule (env: ENABLE_V6=0)")
    parser.add_argument("--dry-run", action="store_true", help="Print the commands without running them")
    parser.add_argument("--verbose", action="store_true", help="Echo every command")
    args = parser.parse_args(argv)

    settings = UfwSettings.from_env(env)
    settings.iface = args.iface or settings.iface
    settings.subnet_v4 = args.subnet or settings.subnet_v4
    if args.no_v6:
        settings.enable_v6 = False
    shell = shell or Shell(verbose=args.verbose, dry_run=args.dry_run)

    if not shell.dry_run and not shell.is_root():
        fail(f"Run as root (use: sudo {sys.argv[0]})", EC_CONFIG)
    if not shell.have("ufw"):
        fail("Missing dependency: ufw", EC_CONFIG)

    console.bold("== Secure SMB over WireGuard :: UFW boundary rule ==")
    console.info(f"Interface: {settings.iface}")
    if settings.subnet_v4:
        console.info(f"Source scope (v4): {settings.subnet_v4}")
    else:
        console.info("Source scope (v4): Anywhere")

    # enabling an already-enabled firewall is a no-op
    shell.run(["ufw", "--force", "enable"])
    console.ok("UFW enabled")

    if not apply_v4_rule(shell, settings):
        fail("Failed to apply IPv4 SMB rule", EC_CONFIG)
    console.ok("IPv4 SMB rule applied")

    v6_enabled = ufw.ipv6_enabled(ufw_defaults) if ufw_defaults else ufw.ipv6_enabled()
    if not apply_v6_rule(shell, settings, v6_enabled):
        fail("Failed to apply IPv6 SMB rule", EC_CONFIG)
    console.ok("IPv6 SMB rule applied (or intentionally skipped)")

    console.info("Reloading UFW")
    if not shell.run(["ufw", "reload"]).ok:
        fail("UFW reload failed", EC_CONFIG)
    console.ok("UFW reloaded")

    print()
    console.bold("== Audit view: ufw status verbose ==")
    status = shell.run(["ufw", "status", "verbose"])
    if status.stdout:
        print(status.stdout.rstrip())
    return EC_OK


if __name__ == "__main__":
    sys.exit(main())
