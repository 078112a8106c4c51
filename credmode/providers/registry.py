"""Provider registry for discovery and loading"""

from typing import Any, Dict, List, Optional
from pathlib import Path
import importlib
import logging

from credmode.exceptions import UnknownProviderError
from credmode.providers.base import CloudProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry for cloud provider discovery and loading"""

    def __init__(self, auto_discover: bool = True):
        self._provider_classes: Dict[str, type] = {}
        self._metadata: Dict[str, Dict] = {}

        if auto_discover:
            self.discover_providers()

    def register(self, provider_class: type):
        """Register a provider class"""
        # Instantiate temporarily to get metadata
        temp_instance = provider_class({})
        metadata = temp_instance.load_metadata()

        provider_name = metadata["name"]
        self._provider_classes[provider_name] = provider_class
        self._metadata[provider_name] = metadata

    def get_provider(self, name: str, config: Dict[str, Any] = None) -> CloudProvider:
        """Get provider instance by name

        Args:
            name: Provider name
            config: Provider settings (optional, defaults to empty dict)

        Returns:
            Instantiated provider

        Raises:
            UnknownProviderError: If no provider is registered under name
        """
        if name not in self._provider_classes:
            raise UnknownProviderError(name, self.list_providers())

        if config is None:
            config = {}

        return self._provider_classes[name](config)

    def list_providers(self) -> List[str]:
        """List all registered provider names"""
        return sorted(self._provider_classes.keys())

    def get_metadata(self, name: str) -> Dict:
        """Get provider metadata by name"""
        if name not in self._metadata:
            raise UnknownProviderError(name, self.list_providers())
        return self._metadata[name]

    def discover_providers(self, providers_path: Optional[Path] = None):
        """Discover and register providers from the providers package"""
        if providers_path is None:
            providers_path = Path(__file__).parent

        for provider_dir in sorted(providers_path.iterdir()):
            if not provider_dir.is_dir() or provider_dir.name.startswith("_"):
                continue
            if not (provider_dir / "provider.py").is_file():
                continue

            module_path = f"credmode.providers.{provider_dir.name}.provider"
            module = importlib.import_module(module_path)

            # Convention: {Name}Provider
            class_name = f"{provider_dir.name.capitalize()}Provider"
            if not hasattr(module, class_name):
                logger.warning(f"Provider module {module_path} does not define {class_name}")
                continue

            self.register(getattr(module, class_name))
