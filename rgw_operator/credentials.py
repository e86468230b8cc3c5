"""Gateway keyring secret provisioning."""

import logging
from typing import Optional

from kubernetes.client import CoreV1Api, V1ObjectMeta, V1Secret
from kubernetes.client.exceptions import ApiException

from .admin import ConnectionFactory, admin_session
from .exceptions import AdminConnectionError, CredentialError
from .k8sutil import APP_NAME, KEYRING_KEY, ROOK_SECRET_TYPE, is_already_exists, is_not_found
from .models import ClusterMembership, CredentialRecord


class CredentialProvisioner:
    """Ensures the gateway keyring secret exists, minting it at most once."""

    def __init__(
        self,
        core_v1: CoreV1Api,
        factory: ConnectionFactory,
        config_dir: str,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize credential provisioner.

        Args:
            core_v1: Kubernetes core API
            factory: Opens admin sessions on the Ceph cluster
            config_dir: Directory holding the admin keyring
            logger: Logger to report progress on
        """
        self.core_v1 = core_v1
        self.factory = factory
        self.config_dir = config_dir
        self.logger = logger or logging.getLogger(__name__)

    def ensure_credential(
        self, namespace: str, membership: ClusterMembership
    ) -> Optional[CredentialRecord]:
        """
        Ensure the keyring secret exists in the namespace.

        An existing secret is trusted as-is and never overwritten.

        Args:
            namespace: Kubernetes namespace
            membership: Cluster name and monitors

        Returns:
            The record that was written, or None if the secret already existed

        Raises:
            CredentialError: If the secret cannot be read, minted or saved
        """
        try:
            self.core_v1.read_namespaced_secret(APP_NAME, namespace)
            self.logger.info("the rgw keyring was already generated")
            return None
        except ApiException as e:
            if not is_not_found(e):
                raise CredentialError(f"failed to get rgw secrets. {e}") from e

        self.logger.info("generating rgw keyring")
        try:
            with admin_session(self.factory, membership, self.config_dir) as conn:
                keyring = conn.create_keyring()
        except AdminConnectionError as e:
            raise CredentialError(f"failed to create keyring. {e}") from e

        record = CredentialRecord(name=APP_NAME, namespace=namespace, keyring=keyring)
        secret = V1Secret(
            metadata=V1ObjectMeta(name=record.name, namespace=namespace),
            string_data={KEYRING_KEY: record.keyring},
            type=ROOK_SECRET_TYPE,
        )
        try:
            self.core_v1.create_namespaced_secret(namespace=namespace, body=secret)
        except ApiException as e:
            if not is_already_exists(e):
                raise CredentialError(f"failed to save rgw secrets. {e}") from e
            self.logger.info("rgw keyring was saved by another caller")
            return None

        self.logger.info("rgw keyring saved")
        return record
