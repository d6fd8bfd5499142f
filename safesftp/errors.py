"""
Exception hierarchy for safesftp
"""


class SafeSftpError(Exception):
    """Base safesftp error"""
    pass


class ConfigLoadError(SafeSftpError):
    """sftp.json or config.yaml exists but cannot be read or parsed"""
    pass


class ConfigMatchError(SafeSftpError):
    """No configured context covers the local file"""
    pass


class SFTPConnectionError(SafeSftpError):
    """Connect or authentication failed"""
    pass


class SFTPTransferError(SafeSftpError):
    """Fetch or store failed on an open connection"""
    pass
