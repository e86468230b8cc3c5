"""Configuration for the RGW gateway operator."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Operator settings, read from ``RGW_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RGW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gateway Settings
    namespace: str = "rook"
    version: str = Field(default="", description="rookd image tag, empty for latest")
    replicas: int = Field(default=2, ge=0)
    data_dir: str = "/var/lib/rook"
    startup_delay_seconds: int = Field(
        default=5,
        ge=0,
        description="Pause before rookd starts so pod networking is up",
    )

    # Ceph Settings
    config_dir: str = Field(
        default="/var/lib/rook",
        description="Directory holding the admin keyring and generated ceph.conf",
    )
    ceph_binary: str = "ceph"

    # Kubernetes Settings
    kubeconfig_path: Optional[str] = None
    kube_context: Optional[str] = None

    # Retry Settings (outer loop only)
    retry_attempts: int = Field(default=5, ge=1)
    retry_max_wait: int = Field(default=30, ge=1)

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the operator process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
