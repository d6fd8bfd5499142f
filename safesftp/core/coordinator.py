"""
Upload coordinator - check & stage, confirm & upload, session teardown
"""
import enum
import os
from pathlib import Path
from typing import Callable, Optional

from ..config import RemoteContext, load_contexts
from ..errors import ConfigLoadError, SafeSftpError
from ..host import Host
from ..operations.resolver import resolve
from ..state.credentials import CredentialCache
from ..state.session import ComparisonSession, SessionSlot
from ..state.staging import StagingArea
from ..utils.file_utils import contents_equal, fingerprint
from ..utils.logging import log, vlog
from .sftp_manager import SFTPManager


class Outcome(enum.Enum):
    """Which way an operation ended."""
    NO_CONFIG = "no-config"
    CONFIG_ERROR = "config-error"
    NO_MATCH = "no-match"
    CANCELLED = "cancelled"
    FAILED = "failed"
    IDENTICAL = "identical"
    STAGED = "staged"
    IGNORED = "ignored"
    DECLINED = "declined"
    UPLOADED = "uploaded"
    CLOSED = "closed"


class UploadCoordinator:
    """
    Ties config resolution, credential caching, fingerprint comparison and the
    single comparison session together.

    Every collaborator is passed in: *host* for messages and prompts,
    *connector* builds a fresh SFTPManager-compatible client per operation.
    """

    def __init__(self, host: Host,
                 credentials: Optional[CredentialCache] = None,
                 sessions: Optional[SessionSlot] = None,
                 staging: Optional[StagingArea] = None,
                 connector: Callable[[], SFTPManager] = SFTPManager):
        self.host = host
        self.credentials = credentials if credentials is not None else CredentialCache()
        self.sessions = sessions if sessions is not None else SessionSlot()
        self.staging = staging if staging is not None else StagingArea()
        self._connector = connector

    @property
    def session(self) -> Optional[ComparisonSession]:
        return self.sessions.current

    # ── helpers ──────────────────────────────────────────────────────────────

    def _secret_for(self, ctx: RemoteContext) -> Optional[str]:
        return self.credentials.get_or_prompt(
            ctx.server_identity,
            lambda: self.host.prompt_secret(f"[{ctx.label}] SFTP password"),
        )

    # ── check & stage ────────────────────────────────────────────────────────

    def check_and_stage(self, local_path, workspace_root) -> Outcome:
        """
        Compare *local_path* with its remote counterpart.
        Identical: report and stop. Different: stage the remote bytes, open a
        session (replacing any previous one) and show the diff.
        """
        local_path = os.path.abspath(str(local_path))
        try:
            contexts = load_contexts(Path(workspace_root))
        except ConfigLoadError as exc:
            self.host.error(f"sftp.json error: {exc}")
            return Outcome.CONFIG_ERROR
        if contexts is None:
            vlog(f"[config] no sftp.json under {workspace_root}")
            return Outcome.NO_CONFIG

        match = resolve(local_path, contexts, workspace_root)
        if match is None:
            self.host.warning("No SFTP context in sftp.json matches this file.")
            return Outcome.NO_MATCH

        ctx = match.context
        remote_path = match.remote_path
        secret = self._secret_for(ctx)
        if secret is None:
            self.host.warning("No password entered; upload cancelled.")
            return Outcome.CANCELLED

        try:
            with self._connector() as conn:
                conn.connect(ctx.host, ctx.port, ctx.username, secret)
                remote_data = conn.fetch(remote_path)
                local_data = Path(local_path).read_bytes()

                if contents_equal(remote_data, local_data):
                    vlog(f"[compare] {Path(local_path).name}: {fingerprint(local_data)[:12]}… on both sides")
                    self.host.info("Identical to the server. Upload skipped.")
                    return Outcome.IDENTICAL

                staged = self.staging.stage(local_path, remote_data)
                self.sessions.replace(ComparisonSession(
                    local_path=local_path,
                    remote_path=remote_path,
                    context=ctx,
                    staging_path=str(staged),
                ))
                log(f"[session] {Path(local_path).name} ↔ {ctx.host}:{remote_path}")
                self.host.show_diff(str(staged), local_path,
                                    f"Remote ↔ Local: {Path(local_path).name}")
                return Outcome.STAGED
        except SafeSftpError as exc:
            self.host.error(f"Server connection failed: {exc}")
            return Outcome.FAILED
        except OSError as exc:
            # remote I/O is wrapped by SFTPManager, so this is the local side
            self.host.error(f"Local file error: {exc}")
            return Outcome.FAILED

    # ── confirm & upload ─────────────────────────────────────────────────────

    def on_document_saved(self, path) -> Outcome:
        """
        Save hook. Only acts when *path* is the active session's local file.
        The session is left open whatever happens here.
        """
        if not self.sessions.matches_local(path):
            return Outcome.IGNORED
        session = self.sessions.current
        ctx = session.context

        secret = self._secret_for(ctx)
        if secret is None:
            self.host.warning("No password entered; upload cancelled.")
            return Outcome.CANCELLED

        if not self.host.confirm("Saved. Upload to the server?", "Upload", "Cancel"):
            vlog("[upload] declined by user")
            return Outcome.DECLINED

        try:
            with self._connector() as conn:
                conn.connect(ctx.host, ctx.port, ctx.username, secret)
                conn.store(str(path), session.remote_path)
        except (SafeSftpError, OSError) as exc:
            self.host.error(f"Upload failed: {exc}")
            return Outcome.FAILED
        self.host.info("Upload complete.")
        return Outcome.UPLOADED

    # ── teardown ─────────────────────────────────────────────────────────────

    def on_document_closed(self, path) -> Outcome:
        """Close hook. Closing the staged snapshot ends the session."""
        if not self.sessions.matches_staging(path):
            return Outcome.IGNORED
        ended = self.sessions.clear()
        self.staging.discard(ended.staging_path)
        self.host.info("Diff view closed; session ended.")
        return Outcome.CLOSED

    def shutdown(self):
        """Forget cached secrets, the session and all staged snapshots."""
        self.credentials.clear()
        self.sessions.clear()
        self.staging.cleanup()
