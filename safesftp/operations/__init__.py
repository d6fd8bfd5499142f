"""Operations (context resolution, save watching)"""
from .resolver import Match, resolve, resolve_or_raise, remote_path_for
from .watcher import watch_saves

__all__ = [
    "Match", "resolve", "resolve_or_raise", "remote_path_for",
    "watch_saves",
]
