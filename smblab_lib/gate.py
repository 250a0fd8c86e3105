"""Pass/fail bookkeeping for the aggregation scripts.

Every check is recorded; failures carry an exit code and the gate keeps the
most severe (numerically largest) one. A gate with zero failures is GREEN and
exits 0 regardless of what was skipped along the way.
"""

from colorama import Fore, Style

from . import console
from .constants import EC_OK, EC_CONFIG

PASS = "PASS"
FAIL = "FAIL"
SKIP = "SKIP"


class Gate:
    """Accumulate check results and derive the final exit code."""

    def __init__(self, label: str):
        self.label = label
        self.passed = 0
        self.failed = 0
        self.checks: list[tuple[str, str, int]] = []
        self._worst = EC_OK

    def ok(self, message: str) -> None:
        console.ok(message)
        self.passed += 1
        self.checks.append((message, PASS, EC_OK))

    def skip(self, message: str) -> None:
        """Record an intentionally skipped step; counts as a pass."""
        console.ok(message)
        self.passed += 1
        self.checks.append((message, SKIP, EC_OK))

    def bad(self, message: str, code: int = EC_CONFIG) -> None:
        console.bad_line(message)
        self.failed += 1
        self.checks.append((message, FAIL, code))
        if code > self._worst:
            self._worst = code

    def need_cmd(self, shell, name: str, code: int = EC_CONFIG) -> bool:
        if shell.have(name):
            self.ok(f"{name} present")
            return True
        self.bad(f"Missing dependency: {name}", code)
        return False

    @property
    def exit_code(self) -> int:
        if self.failed == 0:
            return EC_OK
        return self._worst

    @property
    def green(self) -> bool:
        return self.failed == 0

    def summary(self) -> int:
        console.section("Summary")
        if self.checks:
            console.table(
                [[msg, status, code] for msg, status, code in self.checks],
                headers=["Check", "Status", "Code"],
            )
        console.info(f"Passed checks: {self.passed}")
        console.info(f"Failed checks: {self.failed}")
        if self.green:
            console.ok(f"{self.label} gate: GREEN")
        else:
            console.bold(f"{Fore.RED}{self.label} gate: RED{Style.RESET_ALL}")
        return self.exit_code
