"""Outer control loop that re-runs the reconciler until it converges."""

import logging
from typing import Optional

from tenacity import Retrying, before_sleep_log, retry_if_exception_type
from tenacity import stop_after_attempt, wait_exponential

from .admin import CephCliConnectionFactory, ConnectionFactory
from .cluster import ClusterConnection
from .config import Settings, configure_logging, get_settings
from .exceptions import ProvisioningError
from .models import ClusterConfig, ClusterMembership
from .reconciler import Reconciler

logger = logging.getLogger(__name__)


def reconcile_with_retry(
    reconciler: Reconciler,
    membership: Optional[ClusterMembership],
    attempts: int = 5,
    min_wait: float = 1,
    max_wait: float = 30,
) -> None:
    """
    Call ``reconciler.start`` until it succeeds or attempts run out.

    Only step failures are retried; a bad membership fails immediately.

    Args:
        reconciler: Gateway reconciler
        membership: Cluster name and monitors
        attempts: Maximum number of ``start`` calls
        min_wait: Minimum back-off between calls, in seconds
        max_wait: Maximum back-off between calls, in seconds

    Raises:
        PreconditionError: If membership is missing or has no monitors
        ProvisioningError: The last step failure once attempts are exhausted
    """
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(ProvisioningError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    retrying(reconciler.start, membership)


def run(
    membership: ClusterMembership,
    settings: Optional[Settings] = None,
    factory: Optional[ConnectionFactory] = None,
) -> None:
    """
    Provision the gateway using operator settings.

    Args:
        membership: Cluster name and monitors
        settings: Operator settings, read from the environment if omitted
        factory: Admin session factory, the ceph CLI if omitted
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    cluster_config = ClusterConfig.from_settings(settings)
    factory = factory or CephCliConnectionFactory(settings.ceph_binary)

    with ClusterConnection.from_settings(settings) as connection:
        reconciler = Reconciler.from_connection(
            cluster_config, connection, factory, settings.config_dir
        )
        reconcile_with_retry(
            reconciler,
            membership,
            attempts=settings.retry_attempts,
            max_wait=settings.retry_max_wait,
        )

    logger.info(f"rgw gateway provisioned in namespace {cluster_config.namespace}")
