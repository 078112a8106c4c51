"""Base cloud provider interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple
import importlib.resources

import yaml

from credmode.interfaces.capabilities import CredentialPair


class CloudProvider(ABC):
    """Abstract base class for cloud providers

    A provider knows which secret fields hold its credentials, how to build
    an authenticated client from them, and how to probe that client for the
    mint and passthrough capabilities. Probes return a plain bool and raise
    on failure to answer; classification is left to the reconciler.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        metadata = self.load_metadata()
        self.name = metadata["name"]
        self._metadata = metadata

    @property
    def credential_fields(self) -> Tuple[str, str]:
        """Secret field names holding (key id, key material)"""
        fields = self._metadata["credential_fields"]
        return fields["access_key_id"], fields["secret_access_key"]

    @property
    def mint_actions(self) -> List[str]:
        """Permissions required to mint new scoped credentials"""
        return list(self._metadata.get("mint_actions", []))

    @property
    def passthrough_actions(self) -> List[str]:
        """Permissions required to reuse the credential as-is"""
        return list(self._metadata.get("passthrough_actions", []))

    @abstractmethod
    def build_client(self, credentials: CredentialPair, infra_name: str) -> Any:
        """Construct an authenticated client handle

        Args:
            credentials: Credential pair read from the secret
            infra_name: Cluster infrastructure name, used for request tagging

        Returns:
            Opaque handle passed back to the probes
        """
        pass

    @abstractmethod
    def can_mint(self, client: Any) -> bool:
        """Return whether the identity may mint new scoped credentials"""
        pass

    @abstractmethod
    def can_passthrough(self, client: Any) -> bool:
        """Return whether the identity is usable as-is by cluster components"""
        pass

    def load_metadata(self) -> Dict[str, Any]:
        """Load provider.yaml metadata from the provider's package"""
        provider_package = self.__class__.__module__.rsplit('.', 1)[0]
        metadata_file = importlib.resources.files(provider_package) / "provider.yaml"
        return yaml.safe_load(metadata_file.read_text())
