"""Tests for registry settings validation."""

import pytest

from regauth.client.config import DEFAULT_USER_AGENT, RegistryConfig


class TestRegistryConfig:
    def test_defaults(self):
        # Arrange & Act
        config = RegistryConfig(registry="registry-1.docker.io")

        # Assert
        assert config.base_url == "https://registry-1.docker.io"
        assert config.credentials is None
        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.timeout == 30.0
        assert not config.accept_invalid_certs

    def test_insecure_registry_uses_http(self):
        config = RegistryConfig(registry="localhost:5000", insecure_registry=True)

        assert config.base_url == "http://localhost:5000"

    def test_credentials(self):
        config = RegistryConfig(registry="quay.io", username="alice", password="s3cret")

        assert config.credentials == ("alice", "s3cret")

    def test_empty_password_is_still_a_credential(self):
        config = RegistryConfig(registry="quay.io", username="alice", password="")

        assert config.credentials == ("alice", "")

    @pytest.mark.parametrize(
        "registry", ["", "https://quay.io", "quay.io/org/repo", "http://localhost:5000"]
    )
    def test_invalid_registry(self, registry):
        with pytest.raises(ValueError):
            RegistryConfig(registry=registry)

    @pytest.mark.parametrize(
        "username, password", [("alice", None), (None, "s3cret")]
    )
    def test_half_credentials_rejected(self, username, password):
        with pytest.raises(ValueError, match="together"):
            RegistryConfig(registry="quay.io", username=username, password=password)

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_non_positive_timeout_rejected(self, timeout):
        with pytest.raises(ValueError, match="timeout"):
            RegistryConfig(registry="quay.io", timeout=timeout)

    def test_config_is_immutable(self):
        config = RegistryConfig(registry="quay.io")

        with pytest.raises(AttributeError):
            config.registry = "ghcr.io"
