"""Utilities (logging, fingerprints)"""
from .logging import log, vlog, warn, error, set_verbose
from .file_utils import fingerprint, fingerprint_file, contents_equal

__all__ = [
    "log", "vlog", "warn", "error", "set_verbose",
    "fingerprint", "fingerprint_file", "contents_equal",
]
