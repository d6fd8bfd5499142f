"""
In-memory credential cache keyed by server identity (host:port)
"""
from typing import Callable, Optional

from ..utils.logging import vlog


class CredentialCache:
    """
    Process-wide map from ``host:port`` to a previously entered secret.
    Entries are added on the first successful prompt, never expire and are
    dropped all at once by clear(). Nothing is persisted.
    """

    def __init__(self):
        self._secrets: dict[str, str] = {}

    def __contains__(self, identity: str) -> bool:
        return identity in self._secrets

    def __len__(self) -> int:
        return len(self._secrets)

    def get_or_prompt(self, identity: str,
                      prompt_fn: Callable[[], Optional[str]]) -> Optional[str]:
        """
        Return the cached secret for *identity*, or call *prompt_fn* once.
        An empty or None answer means cancelled: returns None, caches nothing.
        """
        secret = self._secrets.get(identity)
        if secret:
            vlog(f"[auth] using cached secret for {identity}")
            return secret

        secret = prompt_fn()
        if not secret:
            return None
        self._secrets[identity] = secret
        return secret

    def clear(self):
        self._secrets.clear()
