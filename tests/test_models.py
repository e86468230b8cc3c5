"""Tests for models and configuration."""

import pytest
from pydantic import ValidationError

from rgw_operator import ClusterConfig, ClusterMembership, MonitorEndpoint, Settings
from rgw_operator import flatten_mon_endpoints
from rgw_operator.k8sutil import get_labels, make_image


class TestModels:
    """Test cases for gateway models."""

    def test_flatten_keeps_order(self):
        """Test monitors flatten in membership order."""
        monitors = [
            MonitorEndpoint(name="b", endpoint="10.0.0.2:6790"),
            MonitorEndpoint(name="a", endpoint="10.0.0.1:6790"),
        ]

        assert flatten_mon_endpoints(monitors) == "b=10.0.0.2:6790,a=10.0.0.1:6790"

    def test_duplicate_monitor_names_rejected(self):
        """Test membership rejects repeated monitor names."""
        with pytest.raises(ValidationError):
            ClusterMembership(
                name="rookcluster",
                monitors=[
                    MonitorEndpoint(name="a", endpoint="10.0.0.1:6790"),
                    MonitorEndpoint(name="a", endpoint="10.0.0.2:6790"),
                ],
            )

    def test_cluster_config_is_frozen(self, cluster_config):
        """Test the cluster config cannot be mutated."""
        with pytest.raises(ValidationError):
            cluster_config.replicas = 5

    def test_negative_replicas_rejected(self):
        """Test replica count must not be negative."""
        with pytest.raises(ValidationError):
            ClusterConfig(namespace="rook", replicas=-1)

    def test_defaults(self):
        """Test cluster config defaults."""
        config = ClusterConfig(namespace="rook")

        assert config.replicas == 2
        assert config.data_dir == "/var/lib/rook"
        assert config.startup_delay_seconds == 5

    def test_labels_and_image(self):
        """Test label and image helpers."""
        assert get_labels("c1") == {"app": "rgw", "cluster": "c1"}
        assert make_image("v1.2") == "quay.io/rook/rookd:v1.2"
        assert make_image("") == "quay.io/rook/rookd:latest"


class TestSettings:
    """Test cases for Settings."""

    def test_env_prefix(self, monkeypatch):
        """Test settings are read from RGW_ environment variables."""
        monkeypatch.setenv("RGW_NAMESPACE", "storage")
        monkeypatch.setenv("RGW_REPLICAS", "3")
        monkeypatch.setenv("RGW_STARTUP_DELAY_SECONDS", "0")

        settings = Settings()
        config = ClusterConfig.from_settings(settings)

        assert config.namespace == "storage"
        assert config.replicas == 3
        assert config.startup_delay_seconds == 0
