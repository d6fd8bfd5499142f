"""
Host collaborator: the editor-side surface the coordinator talks to.

Host is the abstract API (messages, prompts, diff view). ConsoleHost is the
terminal implementation used by the CLI.
"""
import difflib
import getpass
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .utils.logging import log, warn, error as log_error

PREFIX = "[Safe SFTP]"


class Host(ABC):
    """What safesftp needs from an editor."""

    @abstractmethod
    def info(self, message: str): ...

    @abstractmethod
    def warning(self, message: str): ...

    @abstractmethod
    def error(self, message: str): ...

    @abstractmethod
    def prompt_secret(self, prompt: str) -> Optional[str]:
        """Masked input; None when the user cancels."""

    @abstractmethod
    def prompt_text(self, prompt: str, default: str = "") -> Optional[str]:
        """Free-text input; None when the user cancels."""

    @abstractmethod
    def confirm(self, message: str, accept: str, cancel: str) -> bool:
        """True only for an explicit *accept* answer."""

    @abstractmethod
    def show_diff(self, left: str, right: str, title: str):
        """Open a two-pane diff of two local files."""


class ConsoleHost(Host):
    """Terminal host: log lines for messages, getpass/input for prompts."""

    def __init__(self, stream=None):
        self._out = stream or sys.stdout

    def info(self, message: str):
        log(f"{PREFIX} {message}")

    def warning(self, message: str):
        warn(f"{PREFIX} {message}")

    def error(self, message: str):
        log_error(f"{PREFIX} {message}")

    def prompt_secret(self, prompt: str) -> Optional[str]:
        try:
            return getpass.getpass(f"{prompt}: ") or None
        except (EOFError, KeyboardInterrupt):
            print(file=self._out)
            return None

    def prompt_text(self, prompt: str, default: str = "") -> Optional[str]:
        hint = f" [{default}]" if default else ""
        try:
            value = input(f"{prompt}{hint}: ").strip()
        except (EOFError, KeyboardInterrupt):
            return None
        return value or default or None

    def confirm(self, message: str, accept: str, cancel: str) -> bool:
        print(file=self._out)
        print(f"{PREFIX} {message}", file=self._out)
        while True:
            try:
                choice = input(f"  [{accept}/{cancel}]: ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                return False
            if choice in (accept.lower(), accept[:1].lower(), "y", "yes"):
                return True
            if choice in ("", cancel.lower(), cancel[:1].lower(), "n", "no"):
                return False
            print(f"  Please enter {accept} or {cancel}.", file=self._out)

    def show_diff(self, left: str, right: str, title: str):
        print(file=self._out)
        print(f"{'─' * 64}", file=self._out)
        print(f" {title}", file=self._out)
        print(f"{'─' * 64}", file=self._out)
        left_lines = _read_lines(left)
        right_lines = _read_lines(right)
        diff = difflib.unified_diff(left_lines, right_lines,
                                    fromfile=f"remote: {Path(left).name}",
                                    tofile=f"local:  {Path(right).name}")
        for line in diff:
            self._out.write(line if line.endswith("\n") else line + "\n")
        print(f"{'─' * 64}", file=self._out)
        self._out.flush()


def _read_lines(path: str) -> list[str]:
    return Path(path).read_text(encoding="utf-8", errors="replace").splitlines(keepends=True)
