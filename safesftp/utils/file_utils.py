"""
File utilities (SHA-256 fingerprints, comparison)
"""
import hashlib
from pathlib import Path


def fingerprint(data: bytes) -> str:
    """Return the SHA-256 hex digest of a byte buffer."""
    return hashlib.sha256(data).hexdigest()


def fingerprint_file(path: Path) -> str:
    """Compute the SHA-256 hex digest of a local file"""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()


def contents_equal(a: bytes, b: bytes) -> bool:
    """True if both buffers have the same fingerprint (byte-exact, no normalization)."""
    return fingerprint(a) == fingerprint(b)
