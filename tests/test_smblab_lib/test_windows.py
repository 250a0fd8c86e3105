"""Tests for smblab_lib.windows - output parsing and argv building."""

import os
from datetime import datetime

import pytest

from smblab_lib import windows
from smblab_lib.shell import Shell

from _shared import IPCONFIG, NET_USE_MAPPED, NET_USE_EMPTY, REG_PROVIDER_ORDER


class TestNetUse:
    def test_parse_rows(self):
        rows = windows.parse_net_use(NET_USE_MAPPED)
        assert rows == [
            {"status": "OK", "local": "Z:", "remote": r"\\10.8.0.1\Public"},
            {"status": "Unavailable", "local": "Y:", "remote": r"\\nas\media"},
        ]

    def test_parse_empty(self):
        assert windows.parse_net_use(NET_USE_EMPTY) == []

    def test_find_mapping_case_insensitive(self):
        rows = windows.parse_net_use(NET_USE_MAPPED)
        assert windows.find_mapping(rows, "z:")["remote"] == r"\\10.8.0.1\Public"
        assert windows.find_mapping(rows, "X:") is None

    def test_list_failure(self, fake_shell):
        assert windows.net_use_list(fake_shell({("net", "use"): (2, "")})) == []

    def test_map_with_password(self, fake_shell):
        shell = fake_shell()
        windows.net_use_map(shell, "Z:", r"\\10.8.0.1\Public", "adminsmb", "pw")
        call = shell.calls[0]
        assert call["args"] == ["net", "use", "Z:", r"\\10.8.0.1\Public", "pw",
                                "/user:adminsmb", "/persistent:no"]
        assert call["capture"] is True

    def test_map_password_not_echoed(self, capsys):
        windows.net_use_map(Shell(verbose=True, dry_run=True), "Z:", r"\\10.8.0.1\Public",
                            "adminsmb", "Sup3rS3cret")
        out = capsys.readouterr().out
        assert "Sup3rS3cret" not in out
        assert "/user:adminsmb" in out

    def test_map_prompts_without_password(self, fake_shell):
        shell = fake_shell()
        windows.net_use_map(shell, "Z:", r"\\h\s", "adminsmb", persistent=True)
        call = shell.calls[0]
        assert "*" in call["args"]
        assert call["args"][-1] == "/persistent:yes"
        assert call["capture"] is False

    def test_delete(self, fake_shell):
        shell = fake_shell()
        windows.net_use_delete(shell, "Z:")
        assert shell.calls[0]["args"] == ["net", "use", "Z:", "/delete", "/y"]


class TestIpconfig:
    def test_adapters(self):
        adapters = windows.parse_ipconfig(IPCONFIG)
        assert adapters["wg0-client"] == ["10.8.0.2"]
        assert adapters["Ethernet"] == ["192.168.1.50"]

    def test_adapter_ip(self):
        adapters = windows.parse_ipconfig(IPCONFIG)
        assert windows.adapter_ip(adapters, "WG0-CLIENT") == "10.8.0.2"
        assert windows.adapter_ip(adapters, "wg1") is None

    def test_adapter_without_address(self):
        text = "Unknown adapter wg0-client:\n\n   Media State . . . : Media disconnected\n"
        adapters = windows.parse_ipconfig(text)
        assert adapters == {"wg0-client": []}
        assert windows.adapter_ip(adapters, "wg0-client") is None


class TestPowerShell:
    def test_port_reachable(self, fake_shell):
        shell = fake_shell({("powershell",): (0, "True\r\n")})
        assert windows.port_reachable(shell, "10.8.0.1") is True
        script = shell.calls[0]["args"][-1]
        assert "Test-NetConnection -ComputerName 10.8.0.1 -Port 445" in script

    def test_port_unreachable(self, fake_shell):
        shell = fake_shell({("powershell",): (0, "False\r\n")})
        assert windows.port_reachable(shell, "10.8.0.1") is False

    def test_restart_workstation(self, fake_shell):
        shell = fake_shell()
        windows.restart_workstation(shell)
        args = shell.calls[0]["args"]
        assert args[:4] == ["powershell", "-NoProfile", "-NonInteractive", "-Command"]
        assert "Restart-Service -Name LanmanWorkstation -Force" in args[-1]


class TestProviderOrder:
    def test_read(self, fake_shell):
        shell = fake_shell({("reg", "query"): (0, REG_PROVIDER_ORDER)})
        assert windows.read_provider_order(shell) == ["RDPNP", "LanmanWorkstation", "webclient"]

    def test_read_failure(self, fake_shell):
        assert windows.read_provider_order(fake_shell({("reg", "query"): (1, "")})) is None

    @pytest.mark.parametrize("order, expected", [
        (["RDPNP", "LanmanWorkstation", "webclient"], ["LanmanWorkstation", "RDPNP", "webclient"]),
        (["LanmanWorkstation", "RDPNP"], ["LanmanWorkstation", "RDPNP"]),
        (["RDPNP"], ["LanmanWorkstation", "RDPNP"]),
    ])
    def test_prioritize(self, order, expected):
        assert windows.prioritize_provider(order) == expected

    def test_backup_path(self, fake_shell, tmp_path):
        shell = fake_shell()
        ok, dest = windows.backup_provider_order(shell, str(tmp_path),
                                                 now=datetime(2026, 3, 1, 9, 30, 0))
        assert ok is True
        assert dest == os.path.join(str(tmp_path), "smb-lab", "ProviderOrder-20260301-093000.reg")
        assert os.path.isdir(os.path.join(str(tmp_path), "smb-lab"))
        assert shell.calls[0]["args"][:2] == ["reg", "export"]

    def test_write(self, fake_shell):
        shell = fake_shell()
        windows.write_provider_order(shell, ["LanmanWorkstation", "RDPNP"])
        args = shell.calls[0]["args"]
        assert args[:2] == ["reg", "add"]
        assert args[args.index("/d") + 1] == "LanmanWorkstation,RDPNP"


def test_unc_path():
    assert windows.unc_path("10.8.0.1", "Public") == r"\\10.8.0.1\Public"
