"""Unit tests for cloud provider discovery"""

import pytest

from credmode.exceptions import UnknownProviderError
from credmode.providers.aws import AwsProvider
from credmode.providers.registry import ProviderRegistry
from tests.fakes import FakeProvider


class TestProviderDiscovery:
    """Test providers are discovered from the providers package"""

    def test_aws_is_discovered(self):
        registry = ProviderRegistry()

        assert "aws" in registry.list_providers()

    def test_get_provider_passes_config(self):
        """Test provider settings reach the instance"""
        registry = ProviderRegistry()

        provider = registry.get_provider("aws", {"region": "eu-west-1"})

        assert isinstance(provider, AwsProvider)
        assert provider.config == {"region": "eu-west-1"}

    def test_metadata_lists_credential_fields_and_actions(self):
        registry = ProviderRegistry()

        metadata = registry.get_metadata("aws")

        assert metadata["credential_fields"]["access_key_id"] == "aws_access_key_id"
        assert "iam:CreateAccessKey" in metadata["mint_actions"]
        assert "ec2:RunInstances" in metadata["passthrough_actions"]

    def test_unknown_provider(self):
        """Test unknown names list the registered providers"""
        registry = ProviderRegistry()

        with pytest.raises(UnknownProviderError) as exc_info:
            registry.get_provider("gcp")

        assert exc_info.value.available_providers == ["aws"]

    def test_empty_registry(self):
        registry = ProviderRegistry(auto_discover=False)

        assert registry.list_providers() == []
        with pytest.raises(UnknownProviderError):
            registry.get_metadata("aws")

    def test_manual_registration(self):
        """Test providers outside the package can be registered"""
        registry = ProviderRegistry(auto_discover=False)

        registry.register(FakeProvider)

        assert registry.list_providers() == ["fake"]
        assert isinstance(registry.get_provider("fake"), FakeProvider)

    def test_directories_without_provider_module_are_skipped(self, tmp_path):
        (tmp_path / "notes").mkdir()
        (tmp_path / "_private").mkdir()
        registry = ProviderRegistry(auto_discover=False)

        registry.discover_providers(tmp_path)

        assert registry.list_providers() == []
