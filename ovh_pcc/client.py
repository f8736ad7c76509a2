"""
Main ovh-pcc client: one vCenter session bound to one datacenter
"""

from typing import Optional, List
from pyVmomi import vim
from .config import PccConfig
from .infrastructure.vsphere.client import VSphereClient
from .infrastructure.vsphere.vm_manager import VMManager
from .workflows.clone import CloneRequest, CloneResult, CloneWorkflow


class PccClient:
    """Main client class for the Private Cloud commands"""

    def __init__(self, config: PccConfig, vsphere_client: Optional[VSphereClient] = None):
        config.validate()
        self.config = config
        self.vsphere = vsphere_client or VSphereClient(
            host=config.vsphere_host,
            username=config.vsphere_user,
            password=config.vsphere_pass,
            port=config.vsphere_port,
            disable_ssl_verification=config.vsphere_insecure,
        )
        self.vms = VMManager(self.vsphere, config.vsphere_dc)

    def connect(self) -> None:
        """Connect to the vCenter"""
        self.vsphere.connect()

    def disconnect(self) -> None:
        """Disconnect from the vCenter"""
        self.vsphere.disconnect()

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    def list_templates(self) -> List[vim.VirtualMachine]:
        return self.vms.list_templates()

    def list_vms(self, folder_name: Optional[str] = None) -> List[vim.VirtualMachine]:
        return self.vms.list_vms(folder_name)

    def delete_vm(self, vm_name: str) -> bool:
        return self.vms.delete_vm(vm_name)

    def clone_vm(self, request: CloneRequest, **workflow_kwargs) -> CloneResult:
        """Clone a template; see CloneWorkflow for the stages"""
        return CloneWorkflow(self.vms, **workflow_kwargs).run(request)
