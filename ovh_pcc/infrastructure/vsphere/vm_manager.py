"""
VM lifecycle management for the Private Cloud datacenter
"""

import time
import logging
from typing import Optional, List, Callable
from pyVmomi import vim
from .client import VSphereClient
from ...exceptions import VMNotFoundError, FolderNotFoundError, TimeoutError


logger = logging.getLogger(__name__)


class VMManager:
    """Lists, clones, powers and deletes VMs of one datacenter"""

    def __init__(self, vsphere_client: VSphereClient, datacenter_name: Optional[str] = None):
        self.client = vsphere_client
        self.datacenter_name = datacenter_name
        self._datacenter = None

    @property
    def datacenter(self) -> vim.Datacenter:
        if self._datacenter is None:
            self._datacenter = self.client.get_datacenter(self.datacenter_name)
        return self._datacenter

    def list_templates(self) -> List[vim.VirtualMachine]:
        """VMs under the datacenter VM folder flagged as templates"""
        vms = self.client.find_all_in_folders(self.datacenter.vmFolder, vim.VirtualMachine)
        # Inaccessible or half-created VMs have no config
        return [vm for vm in vms if vm.config is not None and vm.config.template is True]

    def list_vms(self, folder_name: Optional[str] = None) -> List[vim.VirtualMachine]:
        """VMs of the datacenter, or only those below the named folder"""
        base_folder = self.datacenter.vmFolder
        if folder_name:
            base_folder = self.get_folder(folder_name)
        return self.client.find_all_in_folders(base_folder, vim.VirtualMachine)

    def get_folder(self, folder_name: str) -> vim.Folder:
        """Find a folder by name anywhere under the VM folder"""
        for folder in self.client.get_folders(self.datacenter.vmFolder):
            if folder.name == folder_name:
                return folder
        raise FolderNotFoundError(f"No such folder {folder_name}")

    def get_vm(self, vm_name: str) -> vim.VirtualMachine:
        """Find a VM or template by name under the VM folder"""
        vm = self.client.find_in_folders(self.datacenter.vmFolder, vim.VirtualMachine, vm_name)
        if vm is None:
            raise VMNotFoundError(f"VM {vm_name} not found")
        return vm

    def get_default_resource_pool(self) -> vim.ResourcePool:
        """Resource pool of the first compute resource of the datacenter"""
        hosts = self.client.find_all_in_folders(self.datacenter.hostFolder, vim.ComputeResource)
        if not hosts:
            raise VMNotFoundError("No compute resource found in datacenter")
        return hosts[0].resourcePool

    def power_on(self, vm: vim.VirtualMachine) -> bool:
        """Power on VM and wait for the task"""
        if vm.runtime.powerState == vim.VirtualMachinePowerState.poweredOn:
            return True

        task = vm.PowerOnVM_Task()
        self.client.wait_for_task(task)
        return True

    def power_off(self, vm: vim.VirtualMachine) -> bool:
        """Hard power off VM and wait for the task"""
        if vm.runtime.powerState == vim.VirtualMachinePowerState.poweredOff:
            return True

        task = vm.PowerOffVM_Task()
        self.client.wait_for_task(task)
        return True

    def clone_template(self, template: vim.VirtualMachine, new_vm_name: str,
                       customization: Optional[vim.vm.customization.Specification] = None,
                       resource_pool: Optional[vim.ResourcePool] = None) -> None:
        """Clone a template next to itself as a powered off, regular VM"""
        relocate_spec = vim.vm.RelocateSpec()
        relocate_spec.pool = resource_pool or self.get_default_resource_pool()

        clone_spec = vim.vm.CloneSpec()
        clone_spec.location = relocate_spec
        clone_spec.powerOn = False
        clone_spec.template = False
        if customization is not None:
            clone_spec.customization = customization

        logger.info(f"Cloning {template.name} to {new_vm_name}")

        task = template.CloneVM_Task(
            folder=template.parent,
            name=new_vm_name,
            spec=clone_spec
        )
        self.client.wait_for_task(task)

    def delete_vm(self, vm_name: str) -> bool:
        """Power off if needed, then destroy"""
        vm = self.get_vm(vm_name)

        if vm.runtime.powerState != vim.VirtualMachinePowerState.poweredOff:
            self.power_off(vm)

        logger.info(f"Destroying VM {vm_name}")
        task = vm.Destroy_Task()
        self.client.wait_for_task(task)
        return True

    def wait_for_hostname(self, vm: vim.VirtualMachine, hostname: str,
                          interval: float = 2, timeout: Optional[float] = None,
                          on_tick: Optional[Callable[[], None]] = None) -> str:
        """Poll guest info until VMware Tools reports ``hostname``

        Customization renames the guest after first boot, so the reported
        name only matches once customization has been applied. With no timeout
        this waits forever.
        """
        start_time = time.time()

        while vm.guest.hostName != hostname:
            if timeout is not None and time.time() - start_time > timeout:
                raise TimeoutError(
                    f"Timeout waiting for VM {vm.name} to report hostname {hostname}"
                )
            if on_tick:
                on_tick()
            time.sleep(interval)

        return vm.guest.hostName
