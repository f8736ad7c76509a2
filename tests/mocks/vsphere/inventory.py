"""
Mock inventory objects: folders, datacenters, compute resources
"""
from unittest.mock import Mock
from pyVmomi import vim


def make_folder(name, children=None):
    """Folder double; children become its childEntity and get it as parent"""
    folder = Mock(spec=vim.Folder)
    folder.name = name
    folder.childEntity = []
    for child in children or []:
        add_child(folder, child)
    return folder


def add_child(folder, child):
    folder.childEntity.append(child)
    child.parent = folder
    return child


def make_resource_pool(name="Resources"):
    pool = Mock(spec=vim.ResourcePool)
    pool.name = name
    return pool


def make_compute_resource(name, cluster=True):
    vimtype = vim.ClusterComputeResource if cluster else vim.ComputeResource
    compute = Mock(spec=vimtype)
    compute.name = name
    compute.resourcePool = make_resource_pool()
    return compute


def make_datacenter(name, vms=None, hosts=None):
    """Datacenter with a vm and host folder holding the given children"""
    dc = Mock(spec=vim.Datacenter)
    dc.name = name
    dc.vmFolder = make_folder("vm", vms)
    dc.hostFolder = make_folder("host", hosts)
    return dc
