"""Samba service helpers: config parse, listening state, local smbclient."""

import os
import re
from typing import Optional

from . import console
from .constants import SMB_PORT, SAMBA_LOG_GLOB


def testparm_ok(shell) -> bool:
    """True when `testparm -s` parses smb.conf without fatal errors."""
    return shell.run(["testparm", "-s"]).ok


def listening_on(shell, port: int = SMB_PORT) -> tuple[bool, list[str]]:
    """Check `ss -lntp` for a listener on `port`.

    Returns (listening, lines) where lines holds the ss header followed by the
    matching listener rows, ready to print.
    """
    result = shell.run(["ss", "-lntp"])
    if not result.ok:
        return False, []
    pattern = re.compile(rf"[:.]{port}\b")
    lines = result.stdout.splitlines()
    matches = [line for line in lines[1:] if pattern.search(line)]
    if not matches:
        return False, []
    return True, lines[:1] + matches


def smbclient_ls(shell, host: str, share: str, user: str,
                 password: Optional[str] = None) -> bool:
    """List the share root through smbclient.

    With a password it is piped on stdin and output is captured; without one
    the child inherits the console so smbclient can prompt.
    """
    args = ["smbclient", f"//{host}/{share}", "-U", user, "-c", "ls"]
    if password is not None:
        return shell.run(args, input=password + "\n").ok
    return shell.run(args, capture=False).ok


def restart_service(shell, unit: str) -> bool:
    return shell.run(shell.sudo(["systemctl", "restart", unit])).ok


def unit_installed(shell, unit: str) -> bool:
    result = shell.run(["systemctl", "list-unit-files"])
    if not result.ok:
        return False
    pattern = re.compile(rf"^{re.escape(unit)}\.service\b", re.MULTILINE)
    return bool(pattern.search(result.stdout))


def log_files(shell, pattern: str = SAMBA_LOG_GLOB) -> list[str]:
    """Resolve `pattern` with elevated rights; /var/log/samba is often 0750."""
    directory, name = os.path.split(pattern)
    result = shell.run(shell.sudo(["find", directory or ".", "-maxdepth", "1",
                                   "-type", "f", "-name", name]))
    if not result.ok:
        return []
    return sorted(line for line in result.stdout.splitlines() if line.strip())


def tail_logs(shell, pattern: str = SAMBA_LOG_GLOB, files: int = 5,
              lines: int = 40) -> None:
    """Print the tail of the first few Samba log files."""
    paths = log_files(shell, pattern)[:files]
    if not paths:
        console.info(f"No Samba logs matched {pattern}")
        return
    console.info("Samba logs (tail):")
    result = shell.run(shell.sudo(["tail", "-n", str(lines)] + paths))
    if result.stdout:
        print(result.stdout.rstrip())
