"""UFW status parsing and the SMB-over-WireGuard boundary rule."""

import os
import re
from typing import Optional

from .constants import SMB_PORT, UFW_DEFAULTS_FILE, UFW_RULE_COMMENT

RULE_RE = re.compile(
    r"^(?P<to>.+?)\s+"
    r"(?P<action>(?:ALLOW|DENY|REJECT|LIMIT)(?: (?:IN|OUT|FWD))?)\s+"
    r"(?P<source>.+?)\s*(?:#\s*(?P<comment>.*))?$"
)


class UfwRule:
    """One row of the `ufw status verbose` rule table."""

    def __init__(self, to: str, action: str, source: str,
                 comment: Optional[str] = None, raw: str = ""):
        self.to = to
        self.action = action
        self.source = source
        self.comment = comment
        self.raw = raw

    @property
    def v6(self) -> bool:
        return "(v6)" in self.to or "(v6)" in self.source

    @property
    def allows(self) -> bool:
        return self.action.startswith("ALLOW")

    def covers_port(self, port: int = SMB_PORT, proto: str = "tcp") -> bool:
        return re.search(rf"(?<![\d/]){port}/{proto}\b", self.to) is not None

    def __repr__(self) -> str:
        return f"UfwRule({self.to!r}, {self.action!r}, {self.source!r})"


class UfwStatus:
    """Parsed `ufw status verbose` output."""

    def __init__(self, active: bool, rules: list[UfwRule], raw: str = ""):
        self.active = active
        self.rules = rules
        self.raw = raw

    @classmethod
    def parse(cls, text: str) -> "UfwStatus":
        active = re.search(r"^Status:\s*active\b", text, re.MULTILINE) is not None
        rules = []
        in_table = False
        for line in text.splitlines():
            stripped = line.strip()
            if not in_table:
                if stripped.startswith("--"):
                    in_table = True
                continue
            if not stripped:
                continue
            m = RULE_RE.match(stripped)
            if m:
                rules.append(UfwRule(
                    to=m.group("to").strip(),
                    action=m.group("action"),
                    source=m.group("source").strip(),
                    comment=m.group("comment"),
                    raw=stripped,
                ))
        return cls(active, rules, raw=text)

    def port_rules(self, port: int = SMB_PORT) -> list[UfwRule]:
        return [r for r in self.rules if r.allows and r.covers_port(port)]

    def allows_from_anywhere(self, port: int = SMB_PORT) -> bool:
        return any(r.source.startswith("Anywhere") for r in self.port_rules(port))

    def allows_from(self, subnet: str, port: int = SMB_PORT) -> bool:
        return any(subnet in r.source for r in self.port_rules(port))


def evaluate_boundary(status: UfwStatus, subnet: str,
                      port: int = SMB_PORT) -> Optional[str]:
    """Return None when TCP/port is scoped to `subnet`, else the reason it is not."""
    if not status.active:
        return "UFW is not active — boundary cannot be trusted"
    if status.allows_from_anywhere(port):
        return f"TCP/{port} is allowed from Anywhere (security regression)"
    if not status.allows_from(subnet, port):
        return f"No explicit ALLOW for TCP/{port} from VPN subnet ({subnet})"
    return None


def status_text(shell) -> tuple[bool, str]:
    result = shell.run(shell.sudo(["ufw", "status", "verbose"]))
    return result.ok, result.stdout


def build_allow_rule(iface: str, port: int = SMB_PORT, subnet: Optional[str] = None,
                     comment: str = UFW_RULE_COMMENT) -> list[str]:
    args = ["ufw", "allow", "in", "on", iface]
    if subnet:
        args += ["from", subnet]
    args += ["to", "any", "port", str(port), "proto", "tcp", "comment", comment]
    return args


def ipv6_enabled(path: str = UFW_DEFAULTS_FILE) -> bool:
    """UFW only generates (v6) rules when IPV6=yes in its defaults file."""
    if not os.path.isfile(path):
        return False
    with open(path) as f:
        return re.search(r"^IPV6=yes", f.read(), re.MULTILINE | re.IGNORECASE) is not None
