"""Gateway deployment provisioning."""

import logging
from typing import Optional

from kubernetes.client import AppsV1Api, V1Container, V1Deployment, V1DeploymentSpec
from kubernetes.client import V1EmptyDirVolumeSource, V1LabelSelector, V1ObjectMeta
from kubernetes.client import V1PodSpec, V1PodTemplateSpec, V1Volume, V1VolumeMount
from kubernetes.client.exceptions import ApiException

from .exceptions import WorkloadError
from .k8sutil import (
    APP_NAME,
    DATA_DIR_VOLUME,
    KEYRING_ENV_VAR,
    KEYRING_KEY,
    POD_NAME,
    RGW_DNS_NAME,
    RGW_PORT,
    admin_secret_env_var,
    get_labels,
    is_already_exists,
    make_image,
    mon_secret_env_var,
    secret_env_var,
)
from .models import ClusterConfig, ClusterMembership, WorkloadSpec, flatten_mon_endpoints


def rgw_command(config: ClusterConfig, membership: ClusterMembership) -> list[str]:
    """
    Container command that starts rookd in gateway mode.

    Args:
        config: Gateway configuration
        membership: Cluster name and monitors

    Returns:
        Shell invocation with the startup delay prepended
    """
    command = (
        f"/usr/bin/rookd rgw --data-dir={config.data_dir} "
        f"--mon-endpoints={flatten_mon_endpoints(membership.monitors)} "
        f"--cluster-name={membership.name} --rgw-port={RGW_PORT} --rgw-host={RGW_DNS_NAME}"
    )
    # Pod networking is not always ready when the container starts
    if config.startup_delay_seconds:
        command = f"sleep {config.startup_delay_seconds}; {command}"
    return ["/bin/sh", "-c", command]


def rgw_container(config: ClusterConfig, membership: ClusterMembership) -> V1Container:
    return V1Container(
        name=APP_NAME,
        image=make_image(config.version),
        command=rgw_command(config, membership),
        volume_mounts=[V1VolumeMount(name=DATA_DIR_VOLUME, mount_path=config.data_dir)],
        env=[
            secret_env_var(KEYRING_ENV_VAR, APP_NAME, KEYRING_KEY),
            mon_secret_env_var(),
            admin_secret_env_var(),
        ],
    )


def build_deployment(config: ClusterConfig, membership: ClusterMembership) -> V1Deployment:
    """
    Build the gateway deployment.

    The result depends only on the arguments.

    Args:
        config: Gateway configuration
        membership: Cluster name and monitors

    Returns:
        V1Deployment ready to submit
    """
    labels = get_labels(membership.name)

    pod_spec = V1PodSpec(
        containers=[rgw_container(config, membership)],
        restart_policy="Always",
        volumes=[
            V1Volume(name=DATA_DIR_VOLUME, empty_dir=V1EmptyDirVolumeSource()),
        ],
    )

    return V1Deployment(
        api_version="apps/v1",
        kind="Deployment",
        metadata=V1ObjectMeta(name=APP_NAME, namespace=config.namespace),
        spec=V1DeploymentSpec(
            replicas=config.replicas,
            selector=V1LabelSelector(match_labels=labels),
            template=V1PodTemplateSpec(
                metadata=V1ObjectMeta(name=POD_NAME, labels=labels, annotations={}),
                spec=pod_spec,
            ),
        ),
    )


def summarize(deployment: V1Deployment) -> WorkloadSpec:
    """Flatten a gateway deployment into a WorkloadSpec."""
    template = deployment.spec.template
    container = template.spec.containers[0]
    return WorkloadSpec(
        name=deployment.metadata.name,
        namespace=deployment.metadata.namespace,
        labels=dict(template.metadata.labels),
        command=list(container.command),
        image=container.image,
        env=[env.to_dict() for env in container.env],
        volumes=[vol.to_dict() for vol in template.spec.volumes],
        replicas=deployment.spec.replicas,
    )


class WorkloadProvisioner:
    """Ensures the gateway deployment exists."""

    def __init__(self, apps_v1: AppsV1Api, logger: Optional[logging.Logger] = None):
        """
        Initialize workload provisioner.

        Args:
            apps_v1: Kubernetes apps API
            logger: Logger to report progress on
        """
        self.apps_v1 = apps_v1
        self.logger = logger or logging.getLogger(__name__)

    def ensure_workload(
        self, config: ClusterConfig, membership: ClusterMembership
    ) -> WorkloadSpec:
        """
        Create the gateway deployment unless it already exists.

        An existing deployment is not compared against the generated one.

        Args:
            config: Gateway configuration
            membership: Cluster name and monitors

        Returns:
            Summary of the submitted deployment

        Raises:
            WorkloadError: If creation fails for any reason other than a conflict
        """
        deployment = build_deployment(config, membership)
        try:
            self.apps_v1.create_namespaced_deployment(
                namespace=config.namespace,
                body=deployment,
            )
            self.logger.info("rgw deployment started")
        except ApiException as e:
            if not is_already_exists(e):
                raise WorkloadError(f"failed to create rgw deployment. {e}") from e
            self.logger.info("rgw deployment already exists")

        return summarize(deployment)
