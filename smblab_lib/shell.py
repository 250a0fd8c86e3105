"""Thin wrapper around subprocess for the lab scripts."""

import os
import shlex
import shutil
import subprocess
from typing import Optional

from . import console

REDACTED = "****"


class CommandResult:
    """Outcome of one child process."""

    def __init__(self, args: list[str], returncode: int,
                 stdout: str = "", stderr: str = ""):
        self.args = args
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def __repr__(self) -> str:
        return f"CommandResult({self.args!r}, returncode={self.returncode})"


class Shell:
    """Run external commands; failures come back as non-zero CommandResults."""

    def __init__(self, verbose: bool = False, dry_run: bool = False):
        self.verbose = verbose
        self.dry_run = dry_run

    def run(self, args: list[str], input: Optional[str] = None,
            capture: bool = True, timeout: Optional[float] = None,
            secret: Optional[str] = None) -> CommandResult:
        """Run `args`; any argv word equal to `secret` is masked in the echo."""
        if self.verbose or self.dry_run:
            shown = [REDACTED if secret and a == secret else a for a in args]
            console.dim(f"$ {shlex.join(shown)}")
        if self.dry_run:
            return CommandResult(args, 0)
        try:
            proc = subprocess.run(
                args,
                input=input,
                capture_output=capture,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            return CommandResult(args, 127, "", str(e))
        except subprocess.TimeoutExpired as e:
            return CommandResult(args, 124, "", f"timed out after {e.timeout}s")
        return CommandResult(args, proc.returncode, proc.stdout or "", proc.stderr or "")

    def have(self, name: str) -> bool:
        return shutil.which(name) is not None

    def is_root(self) -> bool:
        geteuid = getattr(os, "geteuid", None)
        return geteuid is not None and geteuid() == 0

    def sudo(self, args: list[str]) -> list[str]:
        if self.is_root():
            return list(args)
        return ["sudo"] + list(args)
