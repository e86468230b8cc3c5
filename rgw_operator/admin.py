"""Administrative sessions against the Ceph cluster."""

import logging
import subprocess
import tempfile
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .exceptions import AdminConnectionError
from .models import ClusterMembership

logger = logging.getLogger(__name__)

RGW_CLIENT_NAME = "client.radosgw.gateway"
RGW_CAPS = ["osd", "allow rwx", "mon", "allow rw"]


class AdminConnection(ABC):
    """An open admin session on a Ceph cluster."""

    @abstractmethod
    def create_keyring(self) -> str:
        """
        Get or create the gateway's cephx keyring.

        Returns:
            Keyring text

        Raises:
            AdminConnectionError: If the cluster rejects the request
        """
        pass

    @abstractmethod
    def shutdown(self) -> None:
        """Release the session."""
        pass


class ConnectionFactory(ABC):
    """Opens admin sessions."""

    @abstractmethod
    def connect(self, membership: ClusterMembership, config_dir: str) -> AdminConnection:
        """
        Connect to the cluster as admin.

        Args:
            membership: Cluster name and monitors
            config_dir: Directory holding the admin keyring

        Returns:
            Open AdminConnection

        Raises:
            AdminConnectionError: If the session cannot be opened
        """
        pass


@contextmanager
def admin_session(
    factory: ConnectionFactory,
    membership: ClusterMembership,
    config_dir: str,
) -> Iterator[AdminConnection]:
    """
    Open an admin session and shut it down on every exit path.

    Args:
        factory: Connection factory
        membership: Cluster name and monitors
        config_dir: Directory holding the admin keyring

    Yields:
        Open AdminConnection
    """
    conn = factory.connect(membership, config_dir)
    try:
        yield conn
    finally:
        conn.shutdown()


class CephCliConnection(AdminConnection):
    """Admin session driven through the ``ceph`` command line tool."""

    def __init__(self, ceph_binary: str, conf_path: Path):
        self.ceph_binary = ceph_binary
        self._conf_path: Optional[Path] = conf_path

    def _run(self, *args: str) -> str:
        if not self._conf_path:
            raise AdminConnectionError("Admin session already shut down")

        cmd = [self.ceph_binary, "--conf", str(self._conf_path), "--name", "client.admin", *args]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise AdminConnectionError(f"Failed to run {self.ceph_binary}: {e}") from e

        if result.returncode != 0:
            raise AdminConnectionError(
                f"{' '.join(args[:2])} failed with exit code {result.returncode}: "
                f"{result.stderr.strip()}"
            )
        return result.stdout

    def create_keyring(self) -> str:
        return self._run("auth", "get-or-create", RGW_CLIENT_NAME, *RGW_CAPS)

    def shutdown(self) -> None:
        if self._conf_path and self._conf_path.exists():
            self._conf_path.unlink()
        self._conf_path = None


class CephCliConnectionFactory(ConnectionFactory):
    """Opens ``ceph`` CLI sessions using the admin keyring in the config dir."""

    def __init__(self, ceph_binary: str = "ceph"):
        self.ceph_binary = ceph_binary

    def connect(self, membership: ClusterMembership, config_dir: str) -> AdminConnection:
        keyring_path = Path(config_dir) / f"{membership.name}.keyring"
        if not keyring_path.exists():
            raise AdminConnectionError(f"Admin keyring not found at {keyring_path}")

        mon_host = ",".join(mon.endpoint for mon in membership.monitors)
        conf = (
            "[global]\n"
            f"mon host = {mon_host}\n"
            f"keyring = {keyring_path}\n"
        )

        try:
            with tempfile.NamedTemporaryFile(
                mode="w", dir=config_dir, prefix=f"{membership.name}-", suffix=".conf", delete=False
            ) as f:
                f.write(conf)
                conf_path = Path(f.name)
        except OSError as e:
            raise AdminConnectionError(f"Failed to write ceph config: {e}") from e

        logger.debug(f"Opened admin session to cluster {membership.name} via {conf_path}")
        return CephCliConnection(self.ceph_binary, conf_path)
