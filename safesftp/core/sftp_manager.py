"""
Single-shot SFTP connection (paramiko SSHClient + SFTPClient)
"""
import io
import socket
from typing import Optional

import paramiko

from .. import config as _cfg
from ..errors import SFTPConnectionError, SFTPTransferError
from ..utils.logging import log, vlog


class SFTPManager:
    """
    Wraps paramiko SSHClient + SFTPClient for one operation.
    No retries and no reconnect: a failure is raised as SFTPConnectionError
    or SFTPTransferError. Use as a context manager so close() always runs.
    """

    def __init__(self):
        self._ssh: Optional[paramiko.SSHClient] = None
        self._sftp: Optional[paramiko.SFTPClient] = None
        self._target = ""

    # ── connection ─────────────────────────────────────────────────────────

    def connect(self, host: str, port: int, username: str, secret: str):
        self._target = f"{username}@{host}:{port}"
        log(f"[SFTP] connecting to {self._target} …")
        client = paramiko.SSHClient()
        if _cfg.HOST_KEY_POLICY == "reject":
            client.load_system_host_keys()
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        self._ssh = client
        try:
            client.connect(hostname=host, port=port, username=username, password=secret,
                           timeout=_cfg.CONNECT_TIMEOUT,
                           banner_timeout=_cfg.CONNECT_TIMEOUT,
                           auth_timeout=_cfg.CONNECT_TIMEOUT,
                           look_for_keys=False, allow_agent=False)
            self._sftp = client.open_sftp()
        except (paramiko.SSHException, socket.error) as exc:
            self.close()
            raise SFTPConnectionError(str(exc) or type(exc).__name__)
        log("[SFTP] connected ✓")

    def close(self):
        try:
            if self._sftp:
                self._sftp.close()
        finally:
            self._sftp = None
            if self._ssh:
                self._ssh.close()
                self._ssh = None
                vlog(f"[SFTP] disconnected from {self._target}")

    @property
    def connected(self) -> bool:
        return self._sftp is not None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ── sftp ops ────────────────────────────────────────────────────────────

    def _require(self) -> paramiko.SFTPClient:
        if self._sftp is None:
            raise SFTPConnectionError("not connected")
        return self._sftp

    def fetch(self, remote: str) -> bytes:
        """Download the full content of a remote file."""
        sftp = self._require()
        buf = io.BytesIO()
        try:
            sftp.getfo(remote, buf)
        except (IOError, paramiko.SSHException) as exc:
            raise SFTPTransferError(f"cannot fetch {remote}: {exc}")
        vlog(f"[SFTP] fetched {remote} ({buf.tell()} byte(s))")
        return buf.getvalue()

    def store(self, local: str, remote: str):
        """Upload a local file over the remote one (full overwrite)."""
        sftp = self._require()
        try:
            sftp.put(local, remote)
        except (IOError, paramiko.SSHException) as exc:
            raise SFTPTransferError(f"cannot store {remote}: {exc}")
        vlog(f"[SFTP] stored {local} → {remote}")
