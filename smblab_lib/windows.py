"""Windows client helpers: drive mapping, adapters, services, registry.

Everything goes through the same Shell runner as the server side, so the
helpers import cleanly on any platform and can be exercised with a fake
shell in tests.
"""

import os
import re
from datetime import datetime
from typing import Optional

from .constants import (
    SMB_PORT, WORKSTATION_SERVICE, PROVIDER_ORDER_KEY, PROVIDER_ORDER_VALUE,
    BACKUP_SUBDIR,
)

NET_USE_RE = re.compile(
    r"^\s*(?P<status>[A-Za-z]+)?\s+(?P<local>[A-Za-z]:)\s+(?P<remote>\\\\\S+)"
)
ADAPTER_RE = re.compile(r"^\S.*adapter (?P<name>.+?):\s*$")
IPV4_RE = re.compile(r"IPv4 Address[ .]*:\s*(?P<ip>\d+\.\d+\.\d+\.\d+)")
PROVIDER_ORDER_RE = re.compile(
    rf"{PROVIDER_ORDER_VALUE}\s+REG_(?:EXPAND_)?SZ\s+(?P<value>.*)$", re.MULTILINE
)


def is_windows() -> bool:
    return os.name == "nt"


def unc_path(host: str, share: str) -> str:
    return f"\\\\{host}\\{share}"


# === net use ===

def net_use_map(shell, drive: str, unc: str, user: Optional[str] = None,
                password: Optional[str] = None, persistent: bool = False):
    args = ["net", "use", drive, unc]
    if user:
        # net prompts for the password when "*" is given
        args.append(password if password is not None else "*")
        args.append(f"/user:{user}")
    args.append(f"/persistent:{'yes' if persistent else 'no'}")
    return shell.run(args, capture=password is not None or not user, secret=password)


def net_use_delete(shell, drive: str):
    return shell.run(["net", "use", drive, "/delete", "/y"])


def parse_net_use(text: str) -> list[dict]:
    """Parse `net use` output into status/local/remote rows."""
    rows = []
    for line in text.splitlines():
        m = NET_USE_RE.match(line)
        if m:
            rows.append({
                "status": m.group("status") or "",
                "local": m.group("local").upper(),
                "remote": m.group("remote"),
            })
    return rows


def net_use_list(shell) -> list[dict]:
    result = shell.run(["net", "use"])
    if not result.ok:
        return []
    return parse_net_use(result.stdout)


def find_mapping(mappings: list[dict], drive: str) -> Optional[dict]:
    drive = drive.upper()
    for row in mappings:
        if row["local"] == drive:
            return row
    return None


def drive_listable(drive: str) -> bool:
    try:
        os.listdir(drive + "\\")
    except OSError:
        return False
    return True


# === ipconfig ===

def parse_ipconfig(text: str) -> dict[str, list[str]]:
    """Map adapter name to its IPv4 addresses."""
    adapters: dict[str, list[str]] = {}
    current = None
    for line in text.splitlines():
        m = ADAPTER_RE.match(line)
        if m:
            current = m.group("name")
            adapters[current] = []
            continue
        if current is None:
            continue
        m = IPV4_RE.search(line)
        if m:
            adapters[current].append(m.group("ip"))
    return adapters


def ipconfig_adapters(shell) -> dict[str, list[str]]:
    result = shell.run(["ipconfig"])
    if not result.ok:
        return {}
    return parse_ipconfig(result.stdout)


def adapter_ip(adapters: dict[str, list[str]], name: str) -> Optional[str]:
    for adapter, addresses in adapters.items():
        if adapter.lower() == name.lower() and addresses:
            return addresses[0]
    return None


def flush_dns(shell):
    return shell.run(["ipconfig", "/flushdns"])


# === PowerShell ===

def powershell(shell, script: str):
    return shell.run(["powershell", "-NoProfile", "-NonInteractive", "-Command", script])


def restart_workstation(shell, service: str = WORKSTATION_SERVICE):
    return powershell(shell, f"Restart-Service -Name {service} -Force -ErrorAction Stop")


def port_reachable(shell, host: str, port: int = SMB_PORT) -> bool:
    result = powershell(
        shell,
        f"(Test-NetConnection -ComputerName {host} -Port {port} "
        f"-WarningAction SilentlyContinue).TcpTestSucceeded",
    )
    return result.ok and result.stdout.strip().lower() == "true"


# === Network provider order ===

def read_provider_order(shell) -> Optional[list[str]]:
    result = shell.run(["reg", "query", PROVIDER_ORDER_KEY, "/v", PROVIDER_ORDER_VALUE])
    if not result.ok:
        return None
    m = PROVIDER_ORDER_RE.search(result.stdout)
    if not m:
        return None
    return [p.strip() for p in m.group("value").split(",") if p.strip()]


def prioritize_provider(order: list[str], provider: str = WORKSTATION_SERVICE) -> list[str]:
    """Move `provider` to the front, preserving the order of the rest."""
    rest = [p for p in order if p.lower() != provider.lower()]
    return [provider] + rest


def backup_provider_order(shell, programdata: str,
                          now: Optional[datetime] = None) -> tuple[bool, str]:
    """Export the ProviderOrder key under %ProgramData%\\smb-lab\\."""
    now = now or datetime.now()
    dest_dir = os.path.join(programdata, BACKUP_SUBDIR)
    os.makedirs(dest_dir, exist_ok=True)
    dest = os.path.join(dest_dir, f"ProviderOrder-{now.strftime('%Y%m%d-%H%M%S')}.reg")
    result = shell.run(["reg", "export", PROVIDER_ORDER_KEY, dest, "/y"])
    return result.ok, dest


def write_provider_order(shell, order: list[str]):
    return shell.run([
        "reg", "add", PROVIDER_ORDER_KEY, "/v", PROVIDER_ORDER_VALUE,
        "/t", "REG_SZ", "/d", ",".join(order), "/f",
    ])
