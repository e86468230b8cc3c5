"""Entry point that brings the RGW gateway to a running state."""

import logging
from typing import Any, Callable, Optional

from .admin import ConnectionFactory
from .cluster import ClusterConnection
from .credentials import CredentialProvisioner
from .exceptions import (
    CredentialError,
    ExposureError,
    PreconditionError,
    ProvisioningError,
    WorkloadError,
)
from .models import ClusterConfig, ClusterMembership
from .services import NetworkExposer
from .workload import WorkloadProvisioner


class Reconciler:
    """
    Provisions the gateway keyring, service and deployment, in that order.

    Every step is create-or-ignore against a fixed resource name, so calling
    ``start`` again after a crash, a failure or a concurrent call converges on
    the same resources. Nothing is retried or rolled back here; callers re-run
    ``start`` to finish a partially applied state.
    """

    def __init__(
        self,
        config: ClusterConfig,
        credentials: CredentialProvisioner,
        exposer: NetworkExposer,
        workloads: WorkloadProvisioner,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize reconciler.

        Args:
            config: Gateway configuration
            credentials: Keyring secret provisioner
            exposer: Service provisioner
            workloads: Deployment provisioner
            logger: Logger to report progress on
        """
        self.config = config
        self.credentials = credentials
        self.exposer = exposer
        self.workloads = workloads
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_connection(
        cls,
        config: ClusterConfig,
        connection: ClusterConnection,
        factory: ConnectionFactory,
        config_dir: str,
        logger: Optional[logging.Logger] = None,
    ) -> "Reconciler":
        """
        Build a reconciler wired to a Kubernetes connection.

        Args:
            config: Gateway configuration
            connection: Kubernetes cluster connection
            factory: Opens admin sessions on the Ceph cluster
            config_dir: Directory holding the Ceph admin keyring
            logger: Logger shared by all provisioners
        """
        return cls(
            config,
            credentials=CredentialProvisioner(connection.core_v1, factory, config_dir, logger=logger),
            exposer=NetworkExposer(connection.core_v1, logger=logger),
            workloads=WorkloadProvisioner(connection.apps_v1, logger=logger),
            logger=logger,
        )

    def start(self, membership: Optional[ClusterMembership]) -> None:
        """
        Ensure the gateway keyring, service and deployment exist.

        Args:
            membership: Cluster name and monitors

        Raises:
            PreconditionError: If membership is missing or has no monitors
            ProvisioningError: If a step fails; ``step`` names which one
        """
        self.logger.info("start running rgw")

        if membership is None or not membership.monitors:
            raise PreconditionError("missing mons to start rgw")

        namespace = self.config.namespace
        self._run_step(
            CredentialError,
            self.credentials.ensure_credential,
            namespace,
            membership,
        )
        self._run_step(ExposureError, self.exposer.ensure_exposure, namespace, membership.name)
        self._run_step(WorkloadError, self.workloads.ensure_workload, self.config, membership)

    def _run_step(
        self,
        error_cls: type[ProvisioningError],
        step: Callable[..., Any],
        *args: Any,
    ) -> Any:
        try:
            return step(*args)
        except ProvisioningError as e:
            self.logger.error(f"rgw {e.step} step failed: {e}")
            raise
        except Exception as e:
            # Transport failures from the API client are not ApiExceptions
            self.logger.error(f"rgw {error_cls.step} step failed: {e}")
            raise error_cls(f"unexpected error. {e}") from e
