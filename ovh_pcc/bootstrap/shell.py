"""
Remote shell on top of an SSH connection
"""

import shlex
import time
from dataclasses import dataclass
from typing import Optional
from ..connections.ssh import SSHConnection


@dataclass
class CommandResult:
    """Normalized command execution result"""
    stdout: str
    stderr: str
    exit_code: int
    success: bool
    command: str
    duration: float

    def __bool__(self) -> bool:
        return self.success


class RemoteShell:
    """Runs POSIX shell snippets on the guest, optionally through sudo"""

    def __init__(self, connection: SSHConnection, use_sudo: bool = False):
        self.connection = connection
        self.use_sudo = use_sudo

    def execute_command(self, command: str, timeout: Optional[int] = None) -> CommandResult:
        """Execute a shell snippet; pipes and redirects are kept inside ``sh -c``"""
        start_time = time.time()
        wrapped = f"sh -c {shlex.quote(command)}"

        if self.use_sudo:
            stdout, stderr, exit_code = self.connection.execute_sudo_command(wrapped, timeout=timeout)
        else:
            stdout, stderr, exit_code = self.connection.execute_command(wrapped, timeout=timeout)

        duration = time.time() - start_time

        return CommandResult(
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
            success=exit_code == 0,
            command=command,
            duration=duration
        )
