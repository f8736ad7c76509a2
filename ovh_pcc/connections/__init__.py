"""
SSH access to cloned guests
"""

from .ssh import SSHConnection
from .probe import ProbeResult, probe_ssh, wait_for_ssh

__all__ = [
    'SSHConnection',
    'ProbeResult',
    'probe_ssh',
    'wait_for_ssh',
]
