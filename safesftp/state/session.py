"""
The single in-flight comparison session
"""
import os
from dataclasses import dataclass
from typing import Optional

from ..config import RemoteContext
from ..utils.logging import vlog


@dataclass(frozen=True)
class ComparisonSession:
    """Correlates a local file, its remote path, its context and the staged snapshot."""
    local_path: str
    remote_path: str
    context: RemoteContext
    staging_path: str


def _same_path(a, b) -> bool:
    return os.path.abspath(str(a)) == os.path.abspath(str(b))


class SessionSlot:
    """
    Holds at most one ComparisonSession.

    replace() is last-writer-wins: opening a session while another is open
    silently discards the older one. The four fields live in one immutable
    record, so they are always set and cleared together.
    """

    def __init__(self):
        self._current: Optional[ComparisonSession] = None

    @property
    def current(self) -> Optional[ComparisonSession]:
        return self._current

    @property
    def active(self) -> bool:
        return self._current is not None

    def replace(self, session: ComparisonSession) -> Optional[ComparisonSession]:
        """Install *session*, returning the one it displaced (if any)."""
        previous = self._current
        self._current = session
        if previous is not None:
            vlog(f"[session] replaced session for {previous.local_path} "
                 f"with {session.local_path}")
        return previous

    def clear(self) -> Optional[ComparisonSession]:
        previous = self._current
        self._current = None
        return previous

    def matches_local(self, path) -> bool:
        return self._current is not None and _same_path(self._current.local_path, path)

    def matches_staging(self, path) -> bool:
        return self._current is not None and _same_path(self._current.staging_path, path)
