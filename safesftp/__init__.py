"""safesftp - compare a file with its SFTP counterpart before uploading it"""
__version__ = "0.1.0"
