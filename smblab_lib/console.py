"""Colored status lines shared by every lab script."""

import sys

from colorama import Fore, Style, init
from tabulate import tabulate

init(autoreset=True)


def bold(text: str) -> None:
    print(f"{Style.BRIGHT}{text}{Style.RESET_ALL}")


def info(text: str) -> None:
    print(f"• {text}")


def ok(text: str) -> None:
    print(f"{Fore.GREEN}✅ {text}{Style.RESET_ALL}")


def warn(text: str) -> None:
    print(f"{Fore.YELLOW}⚠️  {text}{Style.RESET_ALL}")


def bad_line(text: str, stream=None) -> None:
    print(f"{Fore.RED}❌ {text}{Style.RESET_ALL}", file=stream or sys.stdout)


def dim(text: str) -> None:
    print(f"{Style.DIM}{text}{Style.RESET_ALL}")


def section(title: str) -> None:
    print()
    bold(f"== {title} ==")


def table(rows: list, headers: list[str]) -> None:
    print(tabulate(rows, headers=headers, tablefmt="grid"))


def fail(message: str, code: int):
    """Print a failure to stderr and exit with `code` (fail-fast scripts)."""
    bad_line(message, stream=sys.stderr)
    raise SystemExit(code)
