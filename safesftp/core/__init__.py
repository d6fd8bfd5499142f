"""Core functionality"""
from .sftp_manager import SFTPManager
from .coordinator import UploadCoordinator, Outcome

__all__ = ["SFTPManager", "UploadCoordinator", "Outcome"]
