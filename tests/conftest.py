"""
Shared test fixtures and configuration for ovh-pcc tests
"""

import pytest
from unittest.mock import Mock
from pyVmomi import vim
from ovh_pcc.config import PccConfig
from ovh_pcc.connections.ssh import SSHConnection
from ovh_pcc.infrastructure.vsphere.client import VSphereClient
from ovh_pcc.infrastructure.vsphere.customization import CustomizationParams
from ovh_pcc.infrastructure.vsphere.vm_manager import VMManager
from tests.mocks.vsphere import (
    make_compute_resource, make_content, make_datacenter, make_folder,
    make_service_instance, make_vm
)


@pytest.fixture
def mock_vsphere_service_instance():
    """Mock vSphere service instance"""
    return make_service_instance()


@pytest.fixture
def inventory():
    """A PCC datacenter laid out like a small production tree

    vm/
      00_UBUNTU-10.04   (template)
      00_DEBIAN-6       (template)
      broken            (no config)
      db01
      web/
        web01
        web02
        archive/
          web-old
    """
    archive = make_folder("archive", [make_vm("web-old", vim.VirtualMachinePowerState.poweredOff)])
    web = make_folder("web", [make_vm("web01"), make_vm("web02"), archive])
    vms = [
        make_vm("00_UBUNTU-10.04", vim.VirtualMachinePowerState.poweredOff, template=True),
        make_vm("00_DEBIAN-6", vim.VirtualMachinePowerState.poweredOff, template=True),
        make_vm("broken", has_config=False),
        make_vm("db01"),
        web,
    ]
    cluster = make_compute_resource("Cluster1")
    return make_datacenter("pcc-178-33-102-96_datacenter144", vms=vms,
                           hosts=[make_folder("hosts", [cluster])])


@pytest.fixture
def vsphere_client(inventory):
    """VSphereClient wired to the mock inventory, no network involved"""
    client = VSphereClient(
        host="pcc-178-33-102-96.ovh.com",
        username="admin",
        password="password"
    )
    client._service_instance = Mock()
    client._content = make_content([inventory])
    return client


@pytest.fixture
def vm_manager(vsphere_client):
    return VMManager(vsphere_client, "pcc-178-33-102-96_datacenter144")


@pytest.fixture
def mock_vsphere_client():
    """Mock vSphere client"""
    client = Mock(spec=VSphereClient)
    client.host = "pcc-178-33-102-96.ovh.com"
    client.wait_for_task = Mock(return_value=True)
    return client


@pytest.fixture
def pcc_config():
    return PccConfig(
        vsphere_host="pcc-178-33-102-96.ovh.com",
        vsphere_user="admin",
        vsphere_pass="password",
        vsphere_dc="pcc-178-33-102-96_datacenter144",
    )


@pytest.fixture
def customization_params():
    return CustomizationParams.from_options(
        hostname="web06",
        ip="46.105.128.246",
        netmask="255.255.255.224",
        gateway="46.105.128.254",
        dns="213.186.33.99",
        domain="intra.kroknet.com",
    )


@pytest.fixture
def mock_ssh_connection():
    """Mock SSH connection usable as a context manager"""
    connection = Mock(spec=SSHConnection)
    connection.host = "46.105.128.246"
    connection.username = "root"
    connection.password = "password"
    connection.__enter__ = Mock(return_value=connection)
    connection.__exit__ = Mock(return_value=False)
    connection.execute_command = Mock(return_value=("", "", 0))
    connection.execute_sudo_command = Mock(return_value=("", "", 0))
    connection.upload_file = Mock(return_value=True)
    connection.is_connected = Mock(return_value=True)
    return connection
