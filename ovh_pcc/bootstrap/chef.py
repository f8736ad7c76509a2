"""
Chef bootstrap over SSH

Installs chef-client on the guest, drops client.rb, the validation key and
a first-boot json holding the run list, then runs chef-client once so the
node registers with the chef server.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Callable
from .distros import DEFAULT_DISTRO, install_command
from .shell import CommandResult, RemoteShell
from ..connections.ssh import SSHConnection
from ..exceptions import BootstrapError


logger = logging.getLogger(__name__)

CHEF_DIR = '/etc/chef'
FIRST_BOOT_PATH = f'{CHEF_DIR}/first-boot.json'
CLIENT_RB_PATH = f'{CHEF_DIR}/client.rb'
VALIDATION_KEY_PATH = f'{CHEF_DIR}/validation.pem'
VALIDATION_KEY_UPLOAD_PATH = '/tmp/validation.pem'  # nosec B108


def parse_run_list(value: Optional[str]) -> List[str]:
    """Split a run list on commas and whitespace"""
    if not value:
        return []
    return [item for item in value.replace(',', ' ').split() if item]


@dataclass
class BootstrapOptions:
    """Everything the bootstrap needs besides the target address"""
    run_list: List[str] = field(default_factory=list)
    ssh_user: str = 'root'
    ssh_password: Optional[str] = None
    identity_file: Optional[str] = None
    distro: str = DEFAULT_DISTRO
    bootstrap_version: Optional[str] = None
    node_name: Optional[str] = None
    environment: Optional[str] = None
    chef_server_url: Optional[str] = None
    validation_client_name: str = 'chef-validator'
    validation_key: Optional[str] = None
    use_sudo: Optional[bool] = None

    @property
    def sudo(self) -> bool:
        if self.use_sudo is not None:
            return self.use_sudo
        return self.ssh_user != 'root'


class ChefBootstrap:
    """Bootstraps chef-client on a reachable Linux guest"""

    def __init__(self, options: BootstrapOptions,
                 connection_factory: Callable[..., SSHConnection] = SSHConnection):
        self.options = options
        self.connection_factory = connection_factory

    def client_rb(self) -> str:
        lines = [
            'log_level        :info',
            'log_location     STDOUT',
        ]
        if self.options.chef_server_url:
            lines.append(f"chef_server_url  '{self.options.chef_server_url}'")
        lines.append(f"validation_client_name '{self.options.validation_client_name}'")
        if self.options.node_name:
            lines.append(f"node_name '{self.options.node_name}'")
        return '\n'.join(lines) + '\n'

    def first_boot(self) -> str:
        return json.dumps({'run_list': self.options.run_list})

    def chef_client_command(self) -> str:
        command = f"chef-client -j {FIRST_BOOT_PATH}"
        if self.options.environment:
            command += f" -E {self.options.environment}"
        return command

    def build_commands(self) -> List[str]:
        """Ordered shell snippets, excluding the key upload"""
        commands = [
            install_command(self.options.distro, self.options.bootstrap_version),
            f"mkdir -p {CHEF_DIR}",
        ]
        if self.options.validation_key:
            commands.append(
                f"mv {VALIDATION_KEY_UPLOAD_PATH} {VALIDATION_KEY_PATH} && "
                f"chmod 600 {VALIDATION_KEY_PATH}"
            )
        commands.append(f"cat > {CLIENT_RB_PATH} <<'EOP'\n{self.client_rb()}EOP")
        commands.append(f"cat > {FIRST_BOOT_PATH} <<'EOP'\n{self.first_boot()}\nEOP")
        commands.append(self.chef_client_command())
        return commands

    def run(self, host: str) -> List[CommandResult]:
        """Connect to ``host`` and run the bootstrap; raises BootstrapError on failure"""
        results = []
        connection = self.connection_factory(
            host=host,
            username=self.options.ssh_user,
            password=self.options.ssh_password,
            key_filename=self.options.identity_file,
        )

        with connection:
            if self.options.validation_key:
                connection.upload_file(self.options.validation_key, VALIDATION_KEY_UPLOAD_PATH)

            shell = RemoteShell(connection, use_sudo=self.options.sudo)
            for command in self.build_commands():
                logger.info(f"Bootstrap {host}: {command.splitlines()[0]}")
                result = shell.execute_command(command, timeout=3600)
                results.append(result)
                if not result.success:
                    raise BootstrapError(
                        f"Bootstrap command failed on {host} with exit code {result.exit_code}",
                        code=result.exit_code,
                        details={'command': command, 'stdout': result.stdout,
                                 'stderr': result.stderr}
                    )

        return results
