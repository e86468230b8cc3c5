"""Pytest configuration and fixtures for RGW operator tests."""

import threading
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
from kubernetes import client
from kubernetes.client.exceptions import ApiException

from rgw_operator import (
    AdminConnection,
    ClusterConfig,
    ClusterMembership,
    ConnectionFactory,
    CredentialProvisioner,
    MonitorEndpoint,
    NetworkExposer,
    Reconciler,
    WorkloadProvisioner,
)


class FakeKubeStore:
    """In-memory stand-in for the core and apps APIs with atomic create."""

    def __init__(self):
        self._lock = threading.Lock()
        self.objects: dict[tuple[str, str, str], Any] = {}
        self.failures: dict[str, ApiException] = {}

    def _create(self, kind: str, namespace: str, body: Any) -> Any:
        with self._lock:
            if kind in self.failures:
                raise self.failures[kind]
            key = (kind, namespace, body.metadata.name)
            if key in self.objects:
                raise ApiException(status=409, reason="AlreadyExists")
            self.objects[key] = body
            return body

    def _read(self, kind: str, name: str, namespace: str) -> Any:
        with self._lock:
            key = (kind, namespace, name)
            if key not in self.objects:
                raise ApiException(status=404, reason="NotFound")
            return self.objects[key]

    def count(self, kind: str) -> int:
        return sum(1 for k in self.objects if k[0] == kind)

    def get(self, kind: str, name: str, namespace: str) -> Optional[Any]:
        return self.objects.get((kind, namespace, name))

    # CoreV1Api
    def read_namespaced_secret(self, name, namespace):
        return self._read("Secret", name, namespace)

    def create_namespaced_secret(self, namespace, body):
        return self._create("Secret", namespace, body)

    def create_namespaced_service(self, namespace, body):
        body.spec.cluster_ip = "10.96.0.42"
        return self._create("Service", namespace, body)

    # AppsV1Api
    def create_namespaced_deployment(self, namespace, body):
        return self._create("Deployment", namespace, body)


class FakeAdminConnection(AdminConnection):
    """Admin session that hands out numbered keyrings."""

    def __init__(self, factory: "FakeConnectionFactory"):
        self.factory = factory
        self.closed = False

    def create_keyring(self) -> str:
        with self.factory.lock:
            self.factory.minted += 1
            number = self.factory.minted
        if self.factory.mint_error:
            raise self.factory.mint_error
        if self.factory.barrier:
            self.factory.barrier.wait(timeout=5)
        return f"[client.radosgw.gateway]\n\tkey = KEY{number}\n"

    def shutdown(self) -> None:
        self.closed = True


class FakeConnectionFactory(ConnectionFactory):
    """Records every admin session it opens."""

    def __init__(self):
        self.lock = threading.Lock()
        self.sessions: list[FakeAdminConnection] = []
        self.minted = 0
        self.connect_error: Optional[Exception] = None
        self.mint_error: Optional[Exception] = None
        self.barrier: Optional[threading.Barrier] = None

    def connect(self, membership, config_dir):
        if self.connect_error:
            raise self.connect_error
        conn = FakeAdminConnection(self)
        with self.lock:
            self.sessions.append(conn)
        return conn

    @property
    def open_sessions(self) -> int:
        return sum(1 for s in self.sessions if not s.closed)


@pytest.fixture
def membership():
    """Sample cluster membership with two monitors."""
    return ClusterMembership(
        name="rookcluster",
        monitors=[
            MonitorEndpoint(name="mon0", endpoint="10.0.0.1:6790"),
            MonitorEndpoint(name="mon1", endpoint="10.0.0.2:6790"),
        ],
    )


@pytest.fixture
def cluster_config():
    """Sample gateway configuration."""
    return ClusterConfig(
        namespace="rook",
        version="v0.4.0",
        replicas=2,
        data_dir="/var/lib/rook",
        startup_delay_seconds=5,
    )


@pytest.fixture
def mock_core_v1():
    """Mock core API."""
    return MagicMock(spec=client.CoreV1Api)


@pytest.fixture
def mock_apps_v1():
    """Mock apps API."""
    return MagicMock(spec=client.AppsV1Api)


@pytest.fixture
def fake_factory():
    """Admin session factory that records sessions."""
    return FakeConnectionFactory()


@pytest.fixture
def kube_store():
    """In-memory Kubernetes store."""
    return FakeKubeStore()


@pytest.fixture
def make_reconciler(cluster_config, kube_store, fake_factory):
    """Build reconcilers sharing one store and one admin factory."""

    def _make() -> Reconciler:
        return Reconciler(
            cluster_config,
            credentials=CredentialProvisioner(kube_store, fake_factory, "/var/lib/rook"),
            exposer=NetworkExposer(kube_store),
            workloads=WorkloadProvisioner(kube_store),
        )

    return _make
