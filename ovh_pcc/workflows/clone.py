"""
Template clone workflow: clone, power on, wait for the guest, bootstrap chef
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Callable, Any
from ..bootstrap.chef import BootstrapOptions, ChefBootstrap
from ..connections.probe import wait_for_ssh
from ..exceptions import PccError
from ..infrastructure.vsphere.customization import CustomizationParams, CustomizationBuilder
from ..infrastructure.vsphere.vm_manager import VMManager


logger = logging.getLogger(__name__)


class CloneStage(enum.Enum):
    RESOLVE = 'resolve'
    CUSTOMIZE = 'customize'
    CLONE = 'clone'
    POWER_ON = 'power_on'
    WAIT_HOSTNAME = 'wait_hostname'
    WAIT_SSH = 'wait_ssh'
    BOOTSTRAP = 'bootstrap'
    DONE = 'done'


@dataclass
class CloneRequest:
    """What to clone and what to do with the result"""
    vm_name: str
    template_name: str
    customization: CustomizationParams
    power_on: bool = True
    hostname_timeout: Optional[float] = None
    bootstrap: Optional[BootstrapOptions] = None


@dataclass
class CloneResult:
    vm_name: str
    stage: CloneStage
    vm: Any = None
    bootstrapped: bool = False


def _tick() -> None:
    print('.', end='', flush=True)


class CloneWorkflow:
    """Runs the clone stages in order

    Any PccError raised by a stage propagates with the failing stage
    recorded under ``details['stage']``.
    """

    def __init__(self, vm_manager: VMManager,
                 customization_builder: Optional[CustomizationBuilder] = None,
                 bootstrap_factory: Callable[[BootstrapOptions], ChefBootstrap] = ChefBootstrap,
                 ssh_waiter: Callable[..., None] = wait_for_ssh,
                 echo: Callable[[str], None] = print,
                 tick: Callable[[], None] = _tick):
        self.vm_manager = vm_manager
        self.customization_builder = customization_builder or CustomizationBuilder()
        self.bootstrap_factory = bootstrap_factory
        self.ssh_waiter = ssh_waiter
        self.echo = echo
        self.tick = tick
        self.stage = CloneStage.RESOLVE

    def run(self, request: CloneRequest) -> CloneResult:
        result = CloneResult(vm_name=request.vm_name, stage=CloneStage.RESOLVE)
        try:
            self._run(request, result)
        except PccError as e:
            e.details.setdefault('stage', self.stage.value)
            raise
        return result

    def _enter(self, stage: CloneStage) -> None:
        logger.debug(f"Clone stage {stage.value}")
        self.stage = stage

    def _run(self, request: CloneRequest, result: CloneResult) -> None:
        self._enter(CloneStage.RESOLVE)
        template = self.vm_manager.get_vm(request.template_name)
        resource_pool = self.vm_manager.get_default_resource_pool()
        result.stage = CloneStage.RESOLVE

        self._enter(CloneStage.CUSTOMIZE)
        spec = self.customization_builder.build(request.customization)
        result.stage = CloneStage.CUSTOMIZE

        self._enter(CloneStage.CLONE)
        self.echo(f"Cloning template {request.template_name} to new VM {request.vm_name}")
        self.vm_manager.clone_template(template, request.vm_name,
                                       customization=spec, resource_pool=resource_pool)
        self.echo(f"Finished creating virtual machine {request.vm_name}")
        result.stage = CloneStage.CLONE

        if not request.power_on:
            result.stage = CloneStage.DONE
            return

        self._enter(CloneStage.POWER_ON)
        vm = self.vm_manager.get_vm(request.vm_name)
        result.vm = vm
        self.vm_manager.power_on(vm)
        self.echo(f"Powered on virtual machine {request.vm_name}")
        result.stage = CloneStage.POWER_ON

        self._enter(CloneStage.WAIT_HOSTNAME)
        self.echo("Waiting for server")
        self.vm_manager.wait_for_hostname(vm, request.vm_name,
                                          timeout=request.hostname_timeout,
                                          on_tick=self.tick)
        self.echo("")
        result.stage = CloneStage.WAIT_HOSTNAME

        if request.bootstrap is None:
            result.stage = CloneStage.DONE
            return

        host = request.customization.ip_address
        self._enter(CloneStage.WAIT_SSH)
        self.echo(f"VM {request.vm_name} - Ready - checking for an SSH connection on {host}")
        self.ssh_waiter(host, on_retry=self.tick)
        self.echo("")
        result.stage = CloneStage.WAIT_SSH

        self._enter(CloneStage.BOOTSTRAP)
        self.echo(f"Starting chef bootstrap of {request.vm_name}")
        self.bootstrap_factory(request.bootstrap).run(host)
        self.echo("Server is up and bootstrapped with a chef-client")
        result.bootstrapped = True

        result.stage = CloneStage.DONE
        self._enter(CloneStage.DONE)
