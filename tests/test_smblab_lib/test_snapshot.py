"""Tests for smblab_lib.snapshot - writes into a temp directory only."""

import json
import os
from datetime import datetime

import pytest

from smblab_lib.perms import PermissionPlan
from smblab_lib.snapshot import Snapshot

from _shared import SS_LISTENING, UFW_SCOPED

EXPECTED_FILES = [
    "meta.txt", "smb.conf.bak", "testparm.txt", "ss-listeners.txt",
    "ufw.txt", "ls.txt", "acl.txt", "manifest.json",
]


@pytest.fixture
def smb_conf(tmp_path):
    path = tmp_path / "smb.conf"
    path.write_text("[global]\n   workgroup = WORKGROUP\n")
    return str(path)


@pytest.fixture
def healthy_shell(fake_shell):
    return fake_shell({
        ("uptime",): (0, "up 3 days, 2 hours\n"),
        ("testparm",): (0, "[global]\n"),
        ("ss",): (0, SS_LISTENING),
        ("ufw",): (0, UFW_SCOPED),
        ("ls",): (0, "drwxr-xr-x 2 root root 4096 /srv\n"),
        ("getfacl",): (0, "# file: srv/samba\n"),
    })


def make_snapshot(tmp_path, smb_conf):
    plan = PermissionPlan("/srv/samba", "public", "direction", "adminsmb", "adminsmb")
    return Snapshot(str(tmp_path / "snaps"), plan, smb_conf,
                    now=datetime(2026, 3, 1, 14, 5, 9))


class TestPath:
    def test_timestamped_dir(self, tmp_path, smb_conf):
        snap = make_snapshot(tmp_path, smb_conf)
        assert snap.path == str(tmp_path / "snaps" / "2026-03-01-140509")

    def test_listing_paths(self, tmp_path, smb_conf):
        snap = make_snapshot(tmp_path, smb_conf)
        assert snap.listing_paths == ["/srv", "/srv/samba", "/srv/samba/public",
                                      "/srv/samba/direction"]


class TestCapture:
    def test_writes_all_files(self, tmp_path, smb_conf, healthy_shell):
        snap = make_snapshot(tmp_path, smb_conf)
        snap.capture(healthy_shell)
        assert sorted(os.listdir(snap.path)) == sorted(EXPECTED_FILES)

    def test_complete_manifest(self, tmp_path, smb_conf, healthy_shell):
        snap = make_snapshot(tmp_path, smb_conf)
        manifest = snap.capture(healthy_shell)
        assert manifest["complete"] is True
        with open(os.path.join(snap.path, "manifest.json")) as f:
            assert json.load(f) == manifest

    def test_command_output_saved(self, tmp_path, smb_conf, healthy_shell):
        snap = make_snapshot(tmp_path, smb_conf)
        snap.capture(healthy_shell)
        with open(os.path.join(snap.path, "ufw.txt")) as f:
            assert "Status: active" in f.read()

    def test_meta(self, tmp_path, smb_conf, healthy_shell):
        snap = make_snapshot(tmp_path, smb_conf)
        snap.capture(healthy_shell)
        with open(os.path.join(snap.path, "meta.txt")) as f:
            meta = f.read()
        for key in ("Timestamp:", "Hostname :", "Kernel   :", "Uptime   : up 3 days"):
            assert key in meta

    def test_config_copied(self, tmp_path, smb_conf, healthy_shell):
        snap = make_snapshot(tmp_path, smb_conf)
        snap.capture(healthy_shell)
        with open(os.path.join(snap.path, "smb.conf.bak")) as f:
            assert "workgroup" in f.read()

    def test_read_only_commands(self, tmp_path, smb_conf, healthy_shell):
        make_snapshot(tmp_path, smb_conf).capture(healthy_shell)
        verbs = {tuple(c["args"][:2]) for c in healthy_shell.calls}
        assert ("ufw", "status") in verbs
        assert not any(c["args"][:2] in (["ufw", "allow"], ["ufw", "reload"])
                       for c in healthy_shell.calls)


class TestPartial:
    def test_missing_config_is_partial(self, tmp_path, healthy_shell):
        snap = make_snapshot(tmp_path, str(tmp_path / "absent.conf"))
        manifest = snap.capture(healthy_shell)
        assert manifest["complete"] is False
        failed = [c for c in manifest["captures"] if not c["ok"]]
        assert [c["name"] for c in failed] == ["smb.conf"]

    def test_failed_command_recorded(self, tmp_path, smb_conf, fake_shell):
        shell = fake_shell({("getfacl",): (1, "")}, available=None)
        manifest = make_snapshot(tmp_path, smb_conf).capture(shell)
        acl = [c for c in manifest["captures"] if c["name"] == "acl"][0]
        assert acl["ok"] is False
        assert acl["error"] == "exit 1"

    def test_missing_tool_still_writes_file(self, tmp_path, smb_conf, fake_shell):
        shell = fake_shell(available={"uptime", "testparm", "ss", "ls"})
        snap = make_snapshot(tmp_path, smb_conf)
        manifest = snap.capture(shell)
        assert os.path.isfile(os.path.join(snap.path, "ufw.txt"))
        assert manifest["complete"] is False
