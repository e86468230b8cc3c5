"""Kubernetes API client bootstrap for the gateway operator."""

import base64
import tempfile
from pathlib import Path
from typing import Optional

from kubernetes import config
from kubernetes.client import ApiClient, AppsV1Api, CoreV1Api

from .config import Settings


class ClusterConnection:
    """Connection to the Kubernetes cluster hosting the gateway."""

    def __init__(
        self,
        kubeconfig_path: Optional[str] = None,
        kubeconfig_data: Optional[str] = None,
        context: Optional[str] = None,
    ):
        """
        Initialize cluster connection.

        With neither ``kubeconfig_path`` nor ``kubeconfig_data`` the
        in-cluster service account is used.

        Args:
            kubeconfig_path: Path to a kubeconfig file
            kubeconfig_data: Base64 encoded kubeconfig
            context: Specific context to use

        Raises:
            ValueError: If kubeconfig is invalid
        """
        self.kubeconfig_path = kubeconfig_path
        self.kubeconfig_data = kubeconfig_data
        self.context = context
        self._api_client: Optional[ApiClient] = None
        self._core_v1: Optional[CoreV1Api] = None
        self._apps_v1: Optional[AppsV1Api] = None
        self._temp_kubeconfig: Optional[Path] = None

        self._initialize_client()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClusterConnection":
        return cls(kubeconfig_path=settings.kubeconfig_path, context=settings.kube_context)

    def _initialize_client(self):
        """Initialize Kubernetes API client."""
        try:
            if self.kubeconfig_data:
                kubeconfig_content = base64.b64decode(self.kubeconfig_data)
                with tempfile.NamedTemporaryFile(mode="wb", delete=False) as f:
                    f.write(kubeconfig_content)
                    self._temp_kubeconfig = Path(f.name)
                config.load_kube_config(
                    config_file=str(self._temp_kubeconfig),
                    context=self.context,
                )
            elif self.kubeconfig_path:
                config.load_kube_config(
                    config_file=self.kubeconfig_path,
                    context=self.context,
                )
            else:
                config.load_incluster_config()

            self._api_client = ApiClient()
            self._core_v1 = CoreV1Api(self._api_client)
            self._apps_v1 = AppsV1Api(self._api_client)

        except Exception as e:
            self._remove_temp_kubeconfig()
            raise ValueError(f"Failed to initialize cluster connection: {e}") from e

    @property
    def core_v1(self) -> CoreV1Api:
        """Get CoreV1Api instance."""
        if not self._core_v1:
            raise RuntimeError("Cluster connection not initialized")
        return self._core_v1

    @property
    def apps_v1(self) -> AppsV1Api:
        """Get AppsV1Api instance."""
        if not self._apps_v1:
            raise RuntimeError("Cluster connection not initialized")
        return self._apps_v1

    def _remove_temp_kubeconfig(self):
        if self._temp_kubeconfig and self._temp_kubeconfig.exists():
            self._temp_kubeconfig.unlink()
        self._temp_kubeconfig = None

    def close(self):
        """Close the cluster connection and clean up resources."""
        if self._api_client:
            self._api_client.close()
            self._api_client = None

        self._remove_temp_kubeconfig()
        self._core_v1 = None
        self._apps_v1 = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
