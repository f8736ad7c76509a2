"""
vSphere mock infrastructure for testing
"""
from .inventory import add_child, make_compute_resource, make_datacenter, make_folder, make_resource_pool
from .service import make_content, make_service_instance
from .tasks import make_task
from .vm import make_vm

__all__ = [
    'add_child',
    'make_compute_resource',
    'make_content',
    'make_datacenter',
    'make_folder',
    'make_resource_pool',
    'make_service_instance',
    'make_task',
    'make_vm',
]
