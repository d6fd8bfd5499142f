"""In-memory state (credentials, session slot, staging area)"""
from .credentials import CredentialCache
from .session import ComparisonSession, SessionSlot
from .staging import StagingArea

__all__ = [
    "CredentialCache",
    "ComparisonSession", "SessionSlot",
    "StagingArea",
]
