"""
vCenter session handling and inventory traversal
"""

import ssl
import time
import atexit
import logging
from contextlib import contextmanager
from typing import Optional, Any, List, Type, Iterator
from pyVim import connect
from pyVmomi import vim
from ...exceptions import (
    ConnectionError, AuthenticationError, DatacenterNotFoundError, TaskError
)


logger = logging.getLogger(__name__)


class VSphereClient:
    """One authenticated session against the Private Cloud vCenter"""

    def __init__(self, host: str, username: str, password: str, port: int = 443,
                 disable_ssl_verification: bool = False):
        self.host = host
        self.username = username
        self.password = password
        self.port = port
        self.disable_ssl_verification = disable_ssl_verification
        self._service_instance = None
        self._content = None

    def _ssl_context(self) -> Optional[ssl.SSLContext]:
        if not self.disable_ssl_verification:
            return None
        # PCC vCenters ship self-signed certificates
        return ssl._create_unverified_context()  # nosec B323

    def connect(self) -> None:
        """Log in and fetch the service content; the session is closed at exit"""
        try:
            self._service_instance = connect.SmartConnect(
                host=self.host,
                user=self.username,
                pwd=self.password,
                port=self.port,
                sslContext=self._ssl_context()
            )
        except vim.fault.InvalidLogin:
            raise AuthenticationError(f"vCenter {self.host} rejected the login of {self.username}")
        except Exception as e:
            raise ConnectionError(f"Cannot reach vCenter {self.host}:{self.port}: {e}")

        atexit.register(connect.Disconnect, self._service_instance)
        self._content = self._service_instance.RetrieveContent()
        logger.info(f"Connected to vCenter {self.host}:{self.port} as {self.username}")

    def disconnect(self) -> None:
        if self._service_instance is None:
            return
        connect.Disconnect(self._service_instance)
        self._service_instance = None
        self._content = None

    @property
    def content(self):
        if not self._content:
            raise ConnectionError(f"Not connected to vCenter {self.host}")
        return self._content

    @contextmanager
    def _container_view(self, vimtype: List) -> Iterator[List[Any]]:
        """Objects of ``vimtype`` below the root folder; the view is destroyed on exit"""
        container = self.content.viewManager.CreateContainerView(
            self.content.rootFolder, vimtype, True)
        try:
            yield list(container.view)
        finally:
            container.Destroy()

    def get_obj(self, vimtype: List, name: str) -> Optional[Any]:
        """First object of ``vimtype`` called ``name``, or None"""
        with self._container_view(vimtype) as objects:
            return next((obj for obj in objects if obj.name == name), None)

    def get_datacenter(self, datacenter_name: Optional[str] = None) -> vim.Datacenter:
        """Datacenter called ``datacenter_name``, the first one when no name is given"""
        if datacenter_name:
            dc = self.get_obj([vim.Datacenter], datacenter_name)
            if dc is None:
                raise DatacenterNotFoundError(f"Datacenter '{datacenter_name}' not found")
            return dc

        with self._container_view([vim.Datacenter]) as datacenters:
            if not datacenters:
                raise DatacenterNotFoundError(f"No datacenter on vCenter {self.host}")
            return datacenters[0]

    def get_folders(self, folder: vim.Folder) -> List[vim.Folder]:
        """Return every folder below ``folder``, depth first, ``folder`` excluded"""
        folders = []
        for child in folder.childEntity:
            if isinstance(child, vim.Folder):
                folders.append(child)
                folders.extend(self.get_folders(child))
        return folders

    def find_all_in_folders(self, folder: vim.Folder, vimtype: Type) -> List[Any]:
        """Return every object of ``vimtype`` found under ``folder`` recursively"""
        found = []
        for child in folder.childEntity:
            if isinstance(child, vim.Folder):
                found.extend(self.find_all_in_folders(child, vimtype))
            elif isinstance(child, vimtype):
                found.append(child)
        return found

    def find_in_folders(self, folder: vim.Folder, vimtype: Type, name: str) -> Optional[Any]:
        """Return the first object of ``vimtype`` named ``name`` under ``folder``"""
        for child in folder.childEntity:
            if isinstance(child, vimtype) and child.name == name:
                return child
            if isinstance(child, vim.Folder):
                found = self.find_in_folders(child, vimtype, name)
                if found is not None:
                    return found
        return None

    def wait_for_task(self, task: vim.Task, poll_interval: float = 1) -> bool:
        """Wait for vSphere task to complete"""
        while task.info.state not in [vim.TaskInfo.State.success,
                                      vim.TaskInfo.State.error]:
            time.sleep(poll_interval)

        if task.info.state == vim.TaskInfo.State.error:
            error = task.info.error
            message = getattr(error, 'msg', None) or str(error)
            raise TaskError(f"Task failed: {message}")

        return True
