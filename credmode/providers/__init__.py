"""Cloud provider implementations"""

from credmode.providers.base import CloudProvider
from credmode.providers.registry import ProviderRegistry

__all__ = ["CloudProvider", "ProviderRegistry"]
