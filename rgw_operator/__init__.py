"""RGW Operator - Idempotent provisioning of the Ceph object gateway on Kubernetes."""

from .admin import (
    AdminConnection,
    CephCliConnection,
    CephCliConnectionFactory,
    ConnectionFactory,
    admin_session,
)
from .cluster import ClusterConnection
from .config import Settings, get_settings
from .credentials import CredentialProvisioner
from .exceptions import (
    AdminConnectionError,
    CredentialError,
    ExposureError,
    PreconditionError,
    ProvisioningError,
    RGWOperatorError,
    WorkloadError,
)
from .models import (
    ClusterConfig,
    ClusterMembership,
    CredentialRecord,
    ExposureSpec,
    MonitorEndpoint,
    WorkloadSpec,
    flatten_mon_endpoints,
)
from .reconciler import Reconciler
from .runner import reconcile_with_retry, run
from .services import NetworkExposer
from .workload import WorkloadProvisioner, build_deployment

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "Reconciler",
    "reconcile_with_retry",
    "run",
    # Provisioners
    "CredentialProvisioner",
    "NetworkExposer",
    "WorkloadProvisioner",
    "build_deployment",
    # Connections
    "ClusterConnection",
    "AdminConnection",
    "ConnectionFactory",
    "CephCliConnection",
    "CephCliConnectionFactory",
    "admin_session",
    # Configuration
    "Settings",
    "get_settings",
    # Models
    "ClusterConfig",
    "ClusterMembership",
    "MonitorEndpoint",
    "CredentialRecord",
    "ExposureSpec",
    "WorkloadSpec",
    "flatten_mon_endpoints",
    # Exceptions
    "RGWOperatorError",
    "PreconditionError",
    "ProvisioningError",
    "CredentialError",
    "ExposureError",
    "WorkloadError",
    "AdminConnectionError",
]
