"""
Image provider selection.
Chooses between the Gemini direct and OpenRouter clients and runs a request
through the chosen one, saving the results when asked to.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from ai.exceptions.provider_exceptions import ConfigurationError
from ai.gemini import GeminiAPI, gemini_api
from ai.models.image_models import GenerationResult, ImageGenerationRequest
from ai.openrouter import OpenRouterAPI, openrouter_api
from config import DEFAULT_FILENAME
from media.image_saver import save_images
from utils.logging_config import get_logger

logger = get_logger(__name__)

ImageProvider = Union[GeminiAPI, OpenRouterAPI]


@dataclass
class ProviderStatus:
    """Provider status information."""

    name: str
    key: str
    env_var: str
    available: bool
    description: str


class ImageProviderManager:
    """
    Holds the image providers in priority order.
    Gemini direct is preferred over OpenRouter when both are configured.
    """

    def __init__(
        self,
        gemini: Optional[GeminiAPI] = None,
        openrouter: Optional[OpenRouterAPI] = None,
    ):
        """Initialize the provider manager."""
        self.providers: Dict[str, ImageProvider] = {
            "gemini": gemini if gemini is not None else gemini_api,
            "openrouter": openrouter if openrouter is not None else openrouter_api,
        }

    def select_provider(self, preference: Optional[str] = None) -> Optional[ImageProvider]:
        """
        Pick the provider for a request.

        Args:
            preference: "gemini", "openrouter", "auto" or None

        Returns:
            The preferred provider when it is configured; for "auto" or None
            the first configured provider in priority order; otherwise None.
        """
        if preference in self.providers:
            provider = self.providers[preference]
            return provider if provider.is_available() else None

        if preference in (None, "", "auto"):
            for provider in self.providers.values():
                if provider.is_available():
                    return provider

        return None

    def _unavailable_message(self, preference: Optional[str]) -> str:
        if preference in self.providers:
            env_var = self.providers[preference].env_var
            return (
                f"The requested provider '{preference}' is not available. "
                f"Please set the {env_var} environment variable."
            )
        env_vars = " or ".join(provider.env_var for provider in self.providers.values())
        return (
            "No image generation provider is available. "
            f"Please set either {env_vars} environment variable."
        )

    def generate_image(self, request: ImageGenerationRequest) -> GenerationResult:
        """
        Generate images with the selected provider.

        Raises:
            ConfigurationError: No provider is configured for the request.
        """
        provider = self.select_provider(request.provider)
        if provider is None:
            message = self._unavailable_message(request.provider)
            logger.error(message)
            raise ConfigurationError(message)

        logger.info(f"Generating image with {provider.name}")
        result = provider.generate_image(request)

        if request.save_to_file and result.success and result.images:
            result.saved_files = save_images(result.images, request.filename or DEFAULT_FILENAME)

        return result

    def get_provider_status(self) -> List[ProviderStatus]:
        """Status of every provider in priority order."""
        return [
            ProviderStatus(
                name=provider.name,
                key=key,
                env_var=provider.env_var,
                available=provider.is_available(),
                description=provider.get_model_info(),
            )
            for key, provider in self.providers.items()
        ]

    def log_provider_status(self):
        logger.info("Nano Banana MCP Server - Provider Status:")
        for status in self.get_provider_status():
            state = "✓ Available" if status.available else f"✗ Not configured (set {status.env_var})"
            logger.info(f"• {status.name}: {state}")


# Global provider manager instance
image_provider_manager = ImageProviderManager()
