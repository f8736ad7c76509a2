"""
SSH session to a freshly cloned guest, built on paramiko
"""

import shlex
import logging
import paramiko
from typing import Optional, Tuple, Dict, Any
from ..exceptions import ConnectionError, AuthenticationError


logger = logging.getLogger(__name__)

SUDO_PROMPT_PREFIX = '[sudo] password for'


def _strip_sudo_prompt(output: str) -> str:
    return '\n'.join(line for line in output.split('\n')
                     if not line.lstrip().startswith(SUDO_PROMPT_PREFIX))


class SSHConnection:
    """Password or key authenticated SSH session

    Usable as a context manager; commands return (stdout, stderr, exit_code).
    """

    def __init__(self, host: str, username: str, password: Optional[str] = None,
                 key_filename: Optional[str] = None, port: int = 22, timeout: int = 30):
        self.host = host
        self.username = username
        self.password = password
        self.key_filename = key_filename
        self.port = port
        self.timeout = timeout
        self._client: Optional[paramiko.SSHClient] = None
        self._sftp = None

    def _auth_kwargs(self) -> Dict[str, Any]:
        if self.key_filename:
            return {'key_filename': self.key_filename}
        if self.password:
            return {'password': self.password, 'look_for_keys': False, 'allow_agent': False}
        return {}

    def connect(self) -> None:
        client = paramiko.SSHClient()
        # New clones have host keys nobody has recorded yet
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())  # nosec B507

        try:
            client.connect(hostname=self.host, port=self.port, username=self.username,
                           timeout=self.timeout, **self._auth_kwargs())
        except paramiko.AuthenticationException as e:
            raise AuthenticationError(f"SSH authentication as {self.username}@{self.host} failed: {e}")
        except (paramiko.SSHException, OSError) as e:
            raise ConnectionError(f"SSH connection to {self.host}:{self.port} failed: {e}")

        self._client = client
        logger.debug(f"SSH session open to {self.username}@{self.host}:{self.port}")

    def disconnect(self) -> None:
        if self._sftp:
            self._sftp.close()
            self._sftp = None
        if self._client:
            self._client.close()
            self._client = None

    def is_connected(self) -> bool:
        if self._client is None:
            return False
        transport = self._client.get_transport()
        return bool(transport and transport.is_active())

    def _require_client(self) -> paramiko.SSHClient:
        if not self.is_connected():
            raise ConnectionError(f"Not connected to {self.host}")
        return self._client

    def execute_command(self, command: str, timeout: Optional[int] = None,
                        get_pty: bool = False) -> Tuple[str, str, int]:
        """Run ``command``; with a pty the remote stderr arrives on stdout"""
        client = self._require_client()
        try:
            _, stdout, stderr = client.exec_command(command, timeout=timeout or self.timeout,  # nosec B601
                                                    get_pty=get_pty)
            out = stdout.read().decode('utf-8', errors='ignore')
            err = stderr.read().decode('utf-8', errors='ignore')
            return out, err, stdout.channel.recv_exit_status()
        except (paramiko.SSHException, OSError) as e:
            raise ConnectionError(f"Command failed on {self.host}: {e}")

    def execute_sudo_command(self, command: str, timeout: Optional[int] = None) -> Tuple[str, str, int]:
        """Run ``command`` through sudo, feeding the login password when there is one"""
        # sudoers with requiretty refuse to run without a pty
        if not self.password:
            return self.execute_command(f"sudo {command}", timeout, get_pty=True)

        stdout, stderr, exit_code = self.execute_command(
            f"echo {shlex.quote(self.password)} | sudo -S -p '' {command}", timeout, get_pty=True
        )
        return _strip_sudo_prompt(stdout), _strip_sudo_prompt(stderr), exit_code

    def upload_file(self, local_path: str, remote_path: str) -> bool:
        client = self._require_client()
        try:
            if not self._sftp:
                self._sftp = client.open_sftp()
            self._sftp.put(local_path, remote_path)
        except (paramiko.SSHException, OSError) as e:
            raise ConnectionError(f"Upload of {local_path} to {self.host}:{remote_path} failed: {e}")
        return True

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
