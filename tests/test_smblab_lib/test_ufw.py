"""Tests for smblab_lib.ufw - status parsing and boundary evaluation."""

import pytest

from smblab_lib.ufw import (
    UfwStatus, build_allow_rule, evaluate_boundary, ipv6_enabled,
)

from _shared import UFW_SCOPED, UFW_ANYWHERE, UFW_INACTIVE, UFW_HEAD


class TestParse:
    def test_active(self):
        assert UfwStatus.parse(UFW_SCOPED).active is True

    def test_inactive(self):
        status = UfwStatus.parse(UFW_INACTIVE)
        assert status.active is False
        assert status.rules == []

    def test_rule_count(self):
        assert len(UfwStatus.parse(UFW_SCOPED).rules) == 3

    def test_rule_fields(self):
        rule = UfwStatus.parse(UFW_SCOPED).rules[1]
        assert rule.to == "445/tcp on wg0-client"
        assert rule.action == "ALLOW IN"
        assert rule.source == "10.8.0.0/24"
        assert rule.comment == "SMB over WireGuard"

    def test_v6_flag(self):
        rules = UfwStatus.parse(UFW_SCOPED).rules
        assert rules[2].v6 is True
        assert rules[1].v6 is False

    def test_overflowing_to_column(self):
        text = UFW_HEAD + "445/tcp (v6) on wg0-client ALLOW IN    Anywhere (v6)              # SMB over WireGuard (v6)\n"
        rule = UfwStatus.parse(text).rules[0]
        assert rule.to == "445/tcp (v6) on wg0-client"
        assert rule.source == "Anywhere (v6)"


class TestPortMatching:
    def test_other_ports_ignored(self):
        text = UFW_HEAD + "4450/tcp                   ALLOW IN    Anywhere\n"
        assert UfwStatus.parse(text).port_rules(445) == []

    def test_deny_rules_ignored(self):
        text = UFW_HEAD + "445/tcp                    DENY IN     Anywhere\n"
        assert UfwStatus.parse(text).allows_from_anywhere() is False


class TestBoundary:
    def test_scoped_ok(self):
        assert evaluate_boundary(UfwStatus.parse(UFW_SCOPED), "10.8.0.0/24") is None

    def test_inactive(self):
        problem = evaluate_boundary(UfwStatus.parse(UFW_INACTIVE), "10.8.0.0/24")
        assert "not active" in problem

    def test_anywhere_is_regression(self):
        problem = evaluate_boundary(UfwStatus.parse(UFW_ANYWHERE), "10.8.0.0/24")
        assert "Anywhere" in problem

    def test_wrong_subnet(self):
        problem = evaluate_boundary(UfwStatus.parse(UFW_SCOPED), "10.9.0.0/24")
        assert "10.9.0.0/24" in problem

    def test_v6_anywhere_counts(self):
        text = UFW_SCOPED + "445/tcp (v6) on wg0-client ALLOW IN    Anywhere (v6)\n"
        assert UfwStatus.parse(text).allows_from_anywhere() is True


class TestBuildRule:
    def test_interface_only(self):
        assert build_allow_rule("wg0-client") == [
            "ufw", "allow", "in", "on", "wg0-client",
            "to", "any", "port", "445", "proto", "tcp",
            "comment", "SMB over WireGuard",
        ]

    def test_with_subnet(self):
        rule = build_allow_rule("wg0", subnet="10.8.0.0/24", comment="x")
        assert rule[5:7] == ["from", "10.8.0.0/24"]
        assert rule[-1] == "x"


class TestIPv6Enabled:
    def test_yes(self, tmp_path):
        path = tmp_path / "ufw"
        path.write_text('IPV6=yes\nDEFAULT_INPUT_POLICY="DROP"\n')
        assert ipv6_enabled(str(path)) is True

    def test_case_insensitive(self, tmp_path):
        path = tmp_path / "ufw"
        path.write_text("ipv6=YES\n")
        assert ipv6_enabled(str(path)) is True

    def test_no(self, tmp_path):
        path = tmp_path / "ufw"
        path.write_text("IPV6=no\n")
        assert ipv6_enabled(str(path)) is False

    def test_missing_file(self, tmp_path):
        assert ipv6_enabled(str(tmp_path / "absent")) is False
