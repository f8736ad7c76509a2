"""
vSphere infrastructure provider for ovh-pcc
"""

from .client import VSphereClient
from .vm_manager import VMManager
from .customization import CustomizationParams, CustomizationBuilder

__all__ = ['VSphereClient', 'VMManager', 'CustomizationParams', 'CustomizationBuilder']
