"""
TCP reachability probe for sshd on a freshly booted guest
"""

import enum
import errno
import select
import socket
import time
import logging
from typing import Optional, Callable
from ..exceptions import SSHProbeError


logger = logging.getLogger(__name__)

SSH_PORT = 22
PROBE_TIMEOUT = 5
RETRY_DELAY = 2

# Seen while the guest network is still coming up; OVH returns
# EHOSTUNREACH quite often in that window
TRANSIENT_ERRNOS = frozenset([errno.ECONNREFUSED, errno.EHOSTUNREACH])


class ProbeResult(enum.Enum):
    READY = 'ready'
    RETRY = 'retry'
    FAILED = 'failed'


def probe_ssh(host: str, port: int = SSH_PORT, timeout: float = PROBE_TIMEOUT,
              retry_delay: float = RETRY_DELAY) -> ProbeResult:
    """Single probe attempt, bounded by ``timeout`` for connect and banner

    Transient errors sleep ``retry_delay`` before returning RETRY so callers
    can loop without their own backoff.
    """
    sock = None
    # connect and banner wait share one budget
    deadline = time.monotonic() + timeout
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
        remaining = max(0, deadline - time.monotonic())
        readable, _, _ = select.select([sock], [], [], remaining)
        if not readable:
            logger.debug(f"No ssh banner from {host}:{port} within {timeout}s")
            return ProbeResult.RETRY

        banner = sock.recv(256).decode('utf-8', errors='ignore').strip()
        logger.debug(f"sshd accepting connections on {host}, banner is {banner}")
        return ProbeResult.READY

    except socket.gaierror as e:
        logger.debug(f"Cannot resolve {host}: {e}")
        time.sleep(retry_delay)
        return ProbeResult.RETRY
    except OSError as e:
        if e.errno in TRANSIENT_ERRNOS:
            logger.debug(f"{host}:{port} not reachable yet: {e}")
            time.sleep(retry_delay)
            return ProbeResult.RETRY
        logger.debug(f"Probe of {host}:{port} failed: {e!r}")
        return ProbeResult.FAILED
    finally:
        if sock is not None:
            sock.close()


def wait_for_ssh(host: str, port: int = SSH_PORT, timeout: float = PROBE_TIMEOUT,
                 retry_delay: float = RETRY_DELAY,
                 on_retry: Optional[Callable[[], None]] = None) -> None:
    """Probe until sshd answers; raises SSHProbeError on a non-transient error"""
    while True:
        result = probe_ssh(host, port, timeout=timeout, retry_delay=retry_delay)
        if result is ProbeResult.READY:
            return
        if result is ProbeResult.FAILED:
            raise SSHProbeError(
                f"No way to connect to {host}:{port} over SSH. If you used a "
                f"private IP, ensure a VPN connection exists",
                details={'host': host, 'port': port}
            )
        if on_retry:
            on_retry()
