"""Global fixtures for the SMB lab test suite."""

import os
import sys

import pytest

# ---------------------------------------------------------------------------
# Project path setup
# ---------------------------------------------------------------------------

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Ensure project root is importable
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Ensure tests/ dir is importable (for _shared module)
TESTS_DIR = os.path.dirname(__file__)
if TESTS_DIR not in sys.path:
    sys.path.insert(0, TESTS_DIR)

from _shared import FakeShell  # noqa: E402


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_shell():
    """Return a factory for scripted FakeShell instances."""
    def _make(responses=None, available=None, root=True, dry_run=False):
        return FakeShell(responses, available=available, root=root, dry_run=dry_run)
    return _make


@pytest.fixture
def share_env(tmp_path):
    """Minimal server environment pointing BASE at a temp share tree."""
    base = tmp_path / "srv" / "samba"
    (base / "public").mkdir(parents=True)
    (base / "direction").mkdir()
    return {"BASE": str(base), "SMBCLIENT_PASS": "s3cret"}


@pytest.fixture
def windows_host(mocker):
    """Pretend to be the Windows client with a listable mapped drive."""
    mocker.patch("smblab_lib.windows.is_windows", return_value=True)
    return mocker.patch("smblab_lib.windows.drive_listable", return_value=True)
