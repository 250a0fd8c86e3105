"""Fixtures specific to smblab_lib tests."""

import pytest

from smblab_lib.gate import Gate
from smblab_lib.perms import PermissionPlan


@pytest.fixture
def gate():
    """Fresh Gate instance."""
    return Gate("Test")


@pytest.fixture
def plan(tmp_path):
    """PermissionPlan rooted in a temp directory."""
    return PermissionPlan(str(tmp_path / "srv" / "samba"), "public", "direction",
                          "adminsmb", "adminsmb")
