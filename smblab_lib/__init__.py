"""SMB-over-WireGuard lab library - shared helpers for the server and client scripts."""

from .constants import *
from .gate import Gate
from .shell import Shell, CommandResult
from .ufw import UfwStatus, evaluate_boundary
from .snapshot import Snapshot

__version__ = "1.0.0"
