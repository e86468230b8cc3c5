"""Gateway service exposure."""

import logging
from typing import Optional

from kubernetes.client import CoreV1Api, V1ObjectMeta, V1Service, V1ServicePort, V1ServiceSpec
from kubernetes.client.exceptions import ApiException

from .exceptions import ExposureError
from .k8sutil import APP_NAME, RGW_PORT, get_labels, is_already_exists
from .models import ExposureSpec


def build_service(spec: ExposureSpec) -> V1Service:
    """Build the service object for an exposure spec."""
    return V1Service(
        api_version="v1",
        kind="Service",
        metadata=V1ObjectMeta(
            name=spec.name,
            namespace=spec.namespace,
            labels=spec.selector_labels,
        ),
        spec=V1ServiceSpec(
            ports=[
                V1ServicePort(
                    name=spec.name,
                    port=spec.port,
                    target_port=spec.port,
                    protocol="TCP",
                )
            ],
            selector=spec.selector_labels,
        ),
    )


class NetworkExposer:
    """Ensures the gateway service exists."""

    def __init__(self, core_v1: CoreV1Api, logger: Optional[logging.Logger] = None):
        self.core_v1 = core_v1
        self.logger = logger or logging.getLogger(__name__)

    def ensure_exposure(self, namespace: str, cluster_name: str) -> ExposureSpec:
        """
        Create the gateway service unless it already exists.

        An existing service is trusted and not compared.

        Args:
            namespace: Kubernetes namespace
            cluster_name: Ceph cluster name used in the pod selector

        Returns:
            The exposure spec that was submitted

        Raises:
            ExposureError: If creation fails for any reason other than a conflict
        """
        spec = ExposureSpec(
            name=APP_NAME,
            namespace=namespace,
            selector_labels=get_labels(cluster_name),
            port=RGW_PORT,
        )

        try:
            created = self.core_v1.create_namespaced_service(
                namespace=namespace,
                body=build_service(spec),
            )
        except ApiException as e:
            if not is_already_exists(e):
                raise ExposureError(f"failed to create rgw service. {e}") from e
            self.logger.info("RGW service already running")
            return spec

        cluster_ip = created.spec.cluster_ip if created and created.spec else None
        self.logger.info(f"RGW service running at {cluster_ip}:{RGW_PORT}")
        return spec
