"""
ovh-pcc exceptions
"""

class PccError(Exception):
    """Base exception for all ovh-pcc errors"""
    def __init__(self, message, code=None, details=None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConnectionError(PccError):
    """Connection-related errors"""
    pass


class AuthenticationError(PccError):
    """Authentication failure"""
    pass


class ConfigError(PccError):
    """Missing or malformed configuration"""
    pass


class DatacenterNotFoundError(PccError):
    """Datacenter not found in inventory"""
    pass


class FolderNotFoundError(PccError):
    """VM folder not found in inventory"""
    pass


class VMNotFoundError(PccError):
    """VM or template not found in inventory"""
    pass


class TaskError(PccError):
    """vSphere task ended in error"""
    pass


class TimeoutError(PccError):
    """Operation timeout"""
    pass


class SSHProbeError(PccError):
    """SSH port probe failed with a non-transient error"""
    pass


class BootstrapError(PccError):
    """Chef bootstrap failure"""
    pass
