"""Shared Kubernetes names, labels and helpers for the gateway."""

from kubernetes.client import V1EnvVar, V1EnvVarSource, V1SecretKeySelector
from kubernetes.client.exceptions import ApiException

# Fixed name of the gateway secret, service and deployment
APP_NAME = "rgw"
POD_NAME = "rook-rgw"

APP_ATTR = "app"
CLUSTER_ATTR = "cluster"

RGW_PORT = 53390
RGW_DNS_NAME = "rook-ceph-rgw"

KEYRING_KEY = "keyring"
KEYRING_ENV_VAR = "ROOKD_RGW_KEYRING"
ROOK_SECRET_TYPE = "kubernetes.io/rook"

DATA_DIR_VOLUME = "rook-data"

IMAGE_REPOSITORY = "quay.io/rook/rookd"

# Written by the monitor component
MON_SECRET_NAME = "mon"
MON_SECRET_KEY = "mon-secret"
ADMIN_SECRET_KEY = "admin-secret"
MON_SECRET_ENV_VAR = "ROOKD_MON_SECRET"
ADMIN_SECRET_ENV_VAR = "ROOKD_ADMIN_SECRET"


def get_labels(cluster_name: str) -> dict[str, str]:
    """Labels shared by the gateway service selector and pod template."""
    return {
        APP_ATTR: APP_NAME,
        CLUSTER_ATTR: cluster_name,
    }


def make_image(version: str) -> str:
    """Image reference for a rookd version; empty means latest."""
    return f"{IMAGE_REPOSITORY}:{version or 'latest'}"


def secret_env_var(env_name: str, secret_name: str, key: str) -> V1EnvVar:
    """Env var resolved from a secret key by the kubelet at pod start."""
    return V1EnvVar(
        name=env_name,
        value_from=V1EnvVarSource(
            secret_key_ref=V1SecretKeySelector(name=secret_name, key=key),
        ),
    )


def mon_secret_env_var() -> V1EnvVar:
    return secret_env_var(MON_SECRET_ENV_VAR, MON_SECRET_NAME, MON_SECRET_KEY)


def admin_secret_env_var() -> V1EnvVar:
    return secret_env_var(ADMIN_SECRET_ENV_VAR, MON_SECRET_NAME, ADMIN_SECRET_KEY)


def is_not_found(exc: ApiException) -> bool:
    return exc.status == 404


def is_already_exists(exc: ApiException) -> bool:
    return exc.status == 409
