"""
Private staging directory for remote snapshots shown in the diff view
"""
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .. import config as _cfg
from ..utils.logging import vlog


class StagingArea:
    """
    Lazily created directory holding ``temp-remote-<basename>`` snapshots.
    Repeated runs for the same base name overwrite the previous snapshot.
    """

    def __init__(self, directory: Optional[Path] = None):
        self._dir: Optional[Path] = Path(directory) if directory else None
        self._owned = False

    @property
    def directory(self) -> Path:
        if self._dir is None:
            if _cfg.STAGING_DIR:
                self._dir = Path(_cfg.STAGING_DIR)
            else:
                self._dir = Path(tempfile.mkdtemp(prefix="safesftp-"))
                self._owned = True
        self._dir.mkdir(parents=True, exist_ok=True)
        return self._dir

    def path_for(self, local_path) -> Path:
        return self.directory / f"temp-remote-{Path(local_path).name}"

    def stage(self, local_path, data: bytes) -> Path:
        """Write remote bytes for *local_path* and return the staging file path."""
        target = self.path_for(local_path)
        target.write_bytes(data)
        vlog(f"[stage] wrote {len(data)} byte(s) → {target}")
        return target

    def discard(self, staging_path):
        Path(staging_path).unlink(missing_ok=True)

    def cleanup(self):
        """Remove the directory if we created it, else just our snapshots."""
        if self._dir is None:
            return
        if self._owned:
            shutil.rmtree(self._dir, ignore_errors=True)
            self._dir = None
            self._owned = False
            return
        for p in self._dir.glob("temp-remote-*"):
            p.unlink(missing_ok=True)
