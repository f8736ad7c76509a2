"""
Configuration-management bootstrap for cloned VMs
"""

from .chef import BootstrapOptions, ChefBootstrap, parse_run_list
from .shell import CommandResult, RemoteShell

__all__ = [
    'BootstrapOptions',
    'ChefBootstrap',
    'CommandResult',
    'RemoteShell',
    'parse_run_list',
]
