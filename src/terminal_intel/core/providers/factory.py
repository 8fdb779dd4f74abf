"""
Construction of the provider pair a session uses.
"""

from typing import Tuple

from ...config.models import TerminalIntelConfig
from ...utils.logging import get_logger
from .base import BaseLLMProvider
from .cloud import CloudProvider
from .ollama import OllamaProvider

logger = get_logger(__name__)


def create_providers(config: TerminalIntelConfig) -> Tuple[OllamaProvider, CloudProvider]:
    """Build the local and cloud providers from configuration."""
    local = OllamaProvider(config.local_model)
    cloud = CloudProvider(config.cloud_model)

    logger.debug(
        f"Providers created: local={config.local_model.base_url} "
        f"model={config.local_model.model}, cloud configured={cloud.is_configured}"
    )
    return local, cloud


async def close_providers(*providers: BaseLLMProvider) -> None:
    """Release HTTP resources of every provider, logging rather than raising."""
    for provider in providers:
        try:
            await provider.cleanup()
        except Exception as e:
            logger.warning(f"Failed to clean up {provider.provider_name} provider: {e}")
