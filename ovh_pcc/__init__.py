"""
ovh-pcc - list, clone and delete VMs on an OVH Private Cloud vCenter
and bootstrap chef onto new clones
"""

__version__ = "0.1.0"

from .client import PccClient
from .config import PccConfig, load_config
from .exceptions import PccError, ConnectionError, VMNotFoundError, ConfigError

__all__ = [
    "PccClient",
    "PccConfig",
    "load_config",
    "PccError",
    "ConnectionError",
    "VMNotFoundError",
    "ConfigError",
]
