#!/usr/bin/env python3
"""
safesftp  —  Compare with the server before you upload
======================================================

Subcommands:
  init      Create a .vscode/sftp.json in the current directory.
  resolve   Show which context and remote path a local file maps to.
  check     Diff a local file against the server copy, then stop.
  edit      Diff, then offer to upload on every save until Ctrl-C.

Run 'safesftp <subcommand> --help' for more details.
"""
import argparse
import json
import sys
from pathlib import Path


# ── shared ───────────────────────────────────────────────────────────────────

def _setup(args):
    """Apply global settings and verbosity; return the workspace root."""
    from safesftp import config as _cfg
    from safesftp.errors import ConfigLoadError
    from safesftp.utils.logging import set_verbose

    set_verbose(args.verbose)
    try:
        _cfg.apply_settings(_cfg.load_global_config())
    except ConfigLoadError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.workspace:
        return Path(args.workspace).expanduser().resolve()
    start = Path(getattr(args, "file", None) or Path.cwd()).expanduser().resolve()
    return _cfg.find_workspace_root(start) or Path.cwd().resolve()


# ── init ─────────────────────────────────────────────────────────────────────

def cmd_init(args):
    """Create .vscode/sftp.json in the workspace root."""
    from safesftp import config as _cfg
    from safesftp.host import ConsoleHost

    console = ConsoleHost()

    root = Path(args.workspace or Path.cwd()).expanduser().resolve()
    target = _cfg.get_sftp_config_path(root)

    if target.exists() and not args.force:
        print(f"error: {target} already exists", file=sys.stderr)
        print("Use --force to overwrite.", file=sys.stderr)
        sys.exit(1)

    host = args.host
    if not host and sys.stdin.isatty():
        host = console.prompt_text("Server hostname")
    if not host:
        print("error: --host is required.", file=sys.stderr)
        sys.exit(1)

    user = args.user
    if not user and sys.stdin.isatty():
        user = console.prompt_text("SFTP user", default="root")
    user = user or "root"

    remote = args.remote
    if not remote and sys.stdin.isatty():
        remote = console.prompt_text("Remote base path")
    if not remote:
        print("error: --remote is required.", file=sys.stderr)
        sys.exit(1)

    entry = {}
    if args.name:
        entry["name"] = args.name
    if args.context:
        entry["context"] = args.context.replace("\\", "/")
    entry.update(host=host, port=args.port or _cfg.DEFAULT_PORT,
                 username=user, remotePath=remote)

    content = json.dumps([entry], indent=2) + "\n"

    if args.dry_run:
        print(f"[dry-run] Would write {target}:")
        print(content)
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    print(f"Created {target}")
    if args.verbose:
        print(content)


# ── resolve ──────────────────────────────────────────────────────────────────

def cmd_resolve(args):
    """Print the context and remote path for a file."""
    from safesftp.config import load_contexts
    from safesftp.errors import SafeSftpError
    from safesftp.operations.resolver import resolve_or_raise

    root = _setup(args)
    try:
        contexts = load_contexts(root)
        if contexts is None:
            print(f"error: no sftp.json under {root}", file=sys.stderr)
            sys.exit(1)
        match = resolve_or_raise(Path(args.file).resolve(), contexts, root)
    except SafeSftpError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    ctx = match.context
    print(f"Context : {ctx.label}")
    print(f"Server  : {ctx.username}@{ctx.server_identity}")
    print(f"Remote  : {match.remote_path}")


# ── check / edit ─────────────────────────────────────────────────────────────

def _exit_code(outcome) -> int:
    from safesftp.core.coordinator import Outcome
    ok = (Outcome.IDENTICAL, Outcome.STAGED, Outcome.UPLOADED, Outcome.CLOSED)
    return 0 if outcome in ok else 1


def cmd_check(args):
    """Compare once and close the diff immediately."""
    from safesftp.core.coordinator import UploadCoordinator, Outcome
    from safesftp.host import ConsoleHost

    root = _setup(args)
    coordinator = UploadCoordinator(ConsoleHost())
    try:
        outcome = coordinator.check_and_stage(Path(args.file).resolve(), root)
        if outcome is Outcome.STAGED:
            coordinator.on_document_closed(coordinator.session.staging_path)
    finally:
        coordinator.shutdown()
    sys.exit(_exit_code(outcome))


def cmd_edit(args):
    """Compare, then watch the file and offer an upload on each save."""
    from safesftp import config as _cfg
    from safesftp.core.coordinator import UploadCoordinator, Outcome
    from safesftp.host import ConsoleHost
    from safesftp.operations.watcher import watch_saves
    from safesftp.utils.logging import log

    root = _setup(args)
    coordinator = UploadCoordinator(ConsoleHost())
    local = Path(args.file).resolve()
    try:
        outcome = coordinator.check_and_stage(local, root)
        if outcome is not Outcome.STAGED:
            sys.exit(_exit_code(outcome))

        log("Edit and save the file to upload it. Ctrl-C closes the diff.")
        interval = args.poll_interval if args.poll_interval is not None else _cfg.POLL_INTERVAL
        try:
            watch_saves(local, coordinator.on_document_saved, interval,
                        should_stop=lambda: not coordinator.sessions.active)
        except KeyboardInterrupt:
            print()
            session = coordinator.session
            if session is not None:
                coordinator.on_document_closed(session.staging_path)
    finally:
        coordinator.shutdown()


# ── main ──────────────────────────────────────────────────────────────────────

def main():
    """CLI entry point for safesftp"""
    parser = argparse.ArgumentParser(
        prog="safesftp",
        description="Compare a local file with its SFTP counterpart before uploading",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    def common(p):
        p.add_argument("--workspace", metavar="PATH",
                       help="Workspace root (default: nearest parent with .vscode/sftp.json)")
        p.add_argument("-v", "--verbose", action="store_true",
                       help="Show extra output")

    # ── init ──────────────────────────────────────────────────────────────────
    init_p = subparsers.add_parser(
        "init",
        help="Create .vscode/sftp.json in the current directory",
        description="Create a .vscode/sftp.json with one remote context.",
    )
    common(init_p)
    init_p.add_argument("--name", metavar="NAME", help="Display name of the context")
    init_p.add_argument("--context", metavar="SUBDIR",
                        help="Local subdirectory the context covers (default: workspace root)")
    init_p.add_argument("--host", metavar="HOST", help="Remote server hostname or IP")
    init_p.add_argument("--port", type=int, metavar="N", help="SFTP port (default: 22)")
    init_p.add_argument("--user", metavar="NAME", help="SFTP username (default: root)")
    init_p.add_argument("--remote", metavar="PATH", help="Remote base path")
    init_p.add_argument("--force", action="store_true", help="Overwrite existing sftp.json")
    init_p.add_argument("-n", "--dry-run", action="store_true",
                        help="Preview without writing files")

    # ── resolve ───────────────────────────────────────────────────────────────
    resolve_p = subparsers.add_parser(
        "resolve",
        help="Show the remote path a local file maps to",
    )
    common(resolve_p)
    resolve_p.add_argument("file", metavar="FILE")

    # ── check ─────────────────────────────────────────────────────────────────
    check_p = subparsers.add_parser(
        "check",
        help="Diff a local file against the server copy",
    )
    common(check_p)
    check_p.add_argument("file", metavar="FILE")

    # ── edit ──────────────────────────────────────────────────────────────────
    edit_p = subparsers.add_parser(
        "edit",
        help="Diff, then offer to upload on every save until Ctrl-C",
    )
    common(edit_p)
    edit_p.add_argument("file", metavar="FILE")
    edit_p.add_argument("--poll-interval", type=float, default=None, metavar="SECONDS",
                        help="Seconds between save checks (default: from config, 1.0)")

    args = parser.parse_args()

    if args.command == "init":
        cmd_init(args)
    elif args.command == "resolve":
        cmd_resolve(args)
    elif args.command == "check":
        cmd_check(args)
    elif args.command == "edit":
        cmd_edit(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
