"""Models for RGW gateway provisioning."""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from .config import Settings


class ClusterConfig(BaseModel):
    """Gateway configuration, fixed for the lifetime of a reconcile call."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    version: str = ""
    replicas: int = Field(default=2, ge=0)
    data_dir: str = "/var/lib/rook"
    startup_delay_seconds: int = Field(default=5, ge=0)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ClusterConfig":
        """Build a cluster config from operator settings."""
        return cls(
            namespace=settings.namespace,
            version=settings.version,
            replicas=settings.replicas,
            data_dir=settings.data_dir,
            startup_delay_seconds=settings.startup_delay_seconds,
        )


class MonitorEndpoint(BaseModel):
    """A single Ceph monitor."""

    model_config = ConfigDict(frozen=True)

    name: str
    endpoint: str  # host:port


class ClusterMembership(BaseModel):
    """Identity and monitors of the Ceph cluster the gateway fronts."""

    model_config = ConfigDict(frozen=True)

    name: str
    monitors: list[MonitorEndpoint] = Field(default_factory=list)

    @field_validator("monitors")
    @classmethod
    def _unique_monitor_names(cls, monitors: list[MonitorEndpoint]) -> list[MonitorEndpoint]:
        seen: set[str] = set()
        for mon in monitors:
            if mon.name in seen:
                raise ValueError(f"duplicate monitor name {mon.name}")
            seen.add(mon.name)
        return monitors


class CredentialRecord(BaseModel):
    """Keyring secret owned by the gateway."""

    name: str
    namespace: str
    keyring: str = Field(repr=False)


class ExposureSpec(BaseModel):
    """Service publishing the gateway port."""

    name: str
    namespace: str
    selector_labels: dict[str, str] = Field(default_factory=dict)
    port: int


class WorkloadSpec(BaseModel):
    """Summary of the gateway deployment that was submitted."""

    name: str
    namespace: str
    labels: dict[str, str] = Field(default_factory=dict)
    command: list[str] = Field(default_factory=list)
    image: str
    env: list[dict[str, Any]] = Field(default_factory=list)
    volumes: list[dict[str, Any]] = Field(default_factory=list)
    replicas: int


def flatten_mon_endpoints(monitors: list[MonitorEndpoint]) -> str:
    """
    Flatten monitors into the ``name=host:port`` list rookd expects.

    Args:
        monitors: Monitors in membership order

    Returns:
        Comma separated endpoint string, e.g. ``"a=10.0.0.1:6790,b=10.0.0.2:6790"``
    """
    return ",".join(f"{mon.name}={mon.endpoint}" for mon in monitors)
