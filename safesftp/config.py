"""
Configuration for safesftp
==========================

Two layers:
  * module-level defaults, overridden by the global YAML settings file
    through apply_settings()
  * per-workspace remote contexts read from .vscode/sftp.json
"""
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigLoadError

# ══════════════════════════════════════════════════════════════════════════════
#  DEFAULTS  ── overridden by the global config.yaml via apply_settings()
# ══════════════════════════════════════════════════════════════════════════════

DEFAULT_PORT = 22

# Workspace-relative location of the remote context list
SFTP_CONFIG_RELPATH = ".vscode/sftp.json"

# Seconds paramiko waits for TCP connect, banner and auth
CONNECT_TIMEOUT = 20

# Seconds `safesftp edit` waits on save events before re-checking for shutdown
POLL_INTERVAL = 1.0

# Staging directory for remote snapshots, or None for a fresh mkdtemp()
STAGING_DIR: Optional[str] = None

# "auto-add" trusts unknown host keys, "reject" requires a known_hosts entry
HOST_KEY_POLICY = "auto-add"

_HOST_KEY_POLICIES = ("auto-add", "reject")


# ══════════════════════════════════════════════════════════════════════════════
#  REMOTE CONTEXTS  ── .vscode/sftp.json
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RemoteContext:
    """One configured mapping from a local subtree to a remote base path."""
    host: str
    username: str
    remote_path: str
    port: int = DEFAULT_PORT
    name: Optional[str] = None
    context: Optional[str] = None

    @property
    def server_identity(self) -> str:
        """Credential cache key: ``host:port``."""
        return f"{self.host}:{self.port or DEFAULT_PORT}"

    @property
    def label(self) -> str:
        """Human-readable name used in prompts."""
        return self.name or self.host

    def context_path(self, workspace_root: Path) -> Path:
        """Absolute, normalized local directory this context covers."""
        root = Path(workspace_root)
        if not self.context:
            return Path(os.path.abspath(root))
        return Path(os.path.abspath(root / self.context))


def context_from_dict(entry: dict) -> RemoteContext:
    """Build a RemoteContext from one sftp.json object."""
    if not isinstance(entry, dict):
        raise ConfigLoadError(f"sftp.json entry must be an object, got {type(entry).__name__}")
    missing = [k for k in ("host", "username", "remotePath") if not entry.get(k)]
    if missing:
        raise ConfigLoadError(f"sftp.json entry is missing {', '.join(missing)}")
    try:
        port = int(entry.get("port") or DEFAULT_PORT)
    except (TypeError, ValueError):
        raise ConfigLoadError(f"sftp.json port must be an integer: {entry.get('port')!r}")
    return RemoteContext(
        host=str(entry["host"]),
        username=str(entry["username"]),
        remote_path=str(entry["remotePath"]),
        port=port,
        name=entry.get("name") or None,
        context=entry.get("context") or None,
    )


def parse_contexts(text: str) -> list[RemoteContext]:
    """Parse sftp.json text: a single object or an array of objects."""
    try:
        parsed = json.loads(text)
    except ValueError as exc:
        raise ConfigLoadError(f"sftp.json parse error: {exc}")
    entries = parsed if isinstance(parsed, list) else [parsed]
    return [context_from_dict(e) for e in entries]


def get_sftp_config_path(workspace_root: Path) -> Path:
    """Return the sftp.json path for a workspace."""
    return Path(workspace_root) / SFTP_CONFIG_RELPATH


def load_contexts(workspace_root: Path) -> Optional[list[RemoteContext]]:
    """
    Load the remote contexts of a workspace.
    Returns None when the workspace has no sftp.json; raises ConfigLoadError
    when it exists but cannot be read or parsed.
    """
    path = get_sftp_config_path(workspace_root)
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"cannot read {path}: {exc}")
    return parse_contexts(text)


def find_workspace_root(start: Optional[Path] = None) -> Optional[Path]:
    """
    Search upward from *start* (default: cwd) for a directory containing
    .vscode/sftp.json. Returns that directory, or None.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while True:
        if get_sftp_config_path(current).is_file():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


# ══════════════════════════════════════════════════════════════════════════════
#  GLOBAL SETTINGS  ── $XDG_CONFIG_HOME/safesftp/config.yaml
# ══════════════════════════════════════════════════════════════════════════════

def get_global_config_dir() -> Path:
    """Return the global config directory for safesftp."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return Path(xdg) / "safesftp"
    if os.name == "nt":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "safesftp"
    return Path.home() / ".config" / "safesftp"


def load_global_config() -> dict:
    """Load global settings; an absent file yields {}."""
    cfg_path = get_global_config_dir() / "config.yaml"
    if not cfg_path.is_file():
        return {}
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"{cfg_path}: {exc}")
    if not isinstance(data, dict):
        raise ConfigLoadError(f"{cfg_path}: expected a mapping at top level")
    return data


def apply_settings(settings: dict):
    """
    Apply a settings dict to the module-level defaults.
    Supports keys: connect_timeout, poll_interval, staging_dir,
                   host_key_policy, config_path.
    """
    global CONNECT_TIMEOUT, POLL_INTERVAL, STAGING_DIR, HOST_KEY_POLICY
    global SFTP_CONFIG_RELPATH

    if "connect_timeout" in settings:
        CONNECT_TIMEOUT = int(settings["connect_timeout"])
    if "poll_interval" in settings:
        POLL_INTERVAL = float(settings["poll_interval"])
    if "staging_dir" in settings:
        sd = settings["staging_dir"]
        STAGING_DIR = str(Path(sd).expanduser()) if sd else None
    if "host_key_policy" in settings:
        policy = str(settings["host_key_policy"])
        if policy not in _HOST_KEY_POLICIES:
            raise ConfigLoadError(
                f"host_key_policy must be one of {', '.join(_HOST_KEY_POLICIES)}: {policy!r}"
            )
        HOST_KEY_POLICY = policy
    if "config_path" in settings:
        SFTP_CONFIG_RELPATH = str(settings["config_path"])
