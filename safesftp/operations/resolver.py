"""
Map a local file to its remote counterpart through the configured contexts
"""
import os
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from ..config import RemoteContext
from ..errors import ConfigMatchError
from ..utils.logging import vlog


@dataclass(frozen=True)
class Match:
    context: RemoteContext
    relative: str  # forward-slash path below the context directory

    @property
    def remote_path(self) -> str:
        return remote_path_for(self.context, self.relative)


def _is_under(path: str, directory: str) -> bool:
    """Path-segment-aware prefix test: /ws/app covers /ws/app/x but not /ws/app2/x."""
    if path == directory:
        return True
    prefix = directory if directory.endswith(os.sep) else directory + os.sep
    return path.startswith(prefix)


def resolve(local_path, contexts: Sequence[RemoteContext],
            workspace_root) -> Optional[Match]:
    """
    Return the FIRST context (list order, not longest prefix) whose directory
    contains *local_path*, with the path relative to that directory.
    Returns None when no context matches.
    """
    local = os.path.abspath(str(local_path))
    for ctx in contexts:
        ctx_dir = str(ctx.context_path(Path(workspace_root)))
        if _is_under(local, ctx_dir):
            relative = os.path.relpath(local, ctx_dir).replace("\\", "/")
            vlog(f"[resolve] {local} → context {ctx.label!r} ({ctx_dir}), rel={relative}")
            return Match(ctx, relative)
    vlog(f"[resolve] no context covers {local}")
    return None


def resolve_or_raise(local_path, contexts: Sequence[RemoteContext],
                     workspace_root) -> Match:
    """Like resolve() but raises ConfigMatchError when nothing matches."""
    match = resolve(local_path, contexts, workspace_root)
    if match is None:
        raise ConfigMatchError(f"no SFTP context covers {local_path}")
    return match


def remote_path_for(context: RemoteContext, relative: str) -> str:
    """POSIX-join the context's remote base path with a relative path."""
    return posixpath.join(context.remote_path, relative.replace("\\", "/"))
