import re
from typing import List, Dict, Any, Optional, Tuple

import requests

from ai.exceptions.provider_exceptions import (
    APIError,
    ConfigurationError,
    ImageProviderError,
)
from ai.models.image_models import (
    GeneratedImage,
    GenerationResult,
    ImageGenerationRequest,
    ReferenceImage,
    UsageInfo,
)
from ai.prompts import compose_prompt
from config import (
    OPENROUTER_API_KEY,
    OPENROUTER_API_URL,
    OPENROUTER_IMAGE_MODEL,
    OPENROUTER_SITE_URL,
    OPENROUTER_APP_NAME,
    OPENROUTER_TIMEOUT,
)
from media.aspect_ratio import parse_aspect_ratio
from media.canvas import generate_canvas_image
from media.image_loader import (
    DEFAULT_MIME_TYPE,
    load_image_file,
    mime_type_from_data_uri,
    to_data_uri,
)
from utils.error_handler import handle_error

# Configure logging
from utils.logging_config import get_logger

logger = get_logger(__name__)

_URL_PATTERN = re.compile(r"https?://[^\s]+")


def _data_uri_format(data_uri: str) -> str:
    """Format tag of a data URI, e.g. ``png`` for ``data:image/png;base64,...``"""
    mime_type = mime_type_from_data_uri(data_uri) or DEFAULT_MIME_TYPE
    return mime_type.split("/")[-1] or "png"


class OpenRouterAPI:
    """Gemini image generation through the OpenRouter chat completions API"""

    name = "OpenRouter API"
    key = "openrouter"
    env_var = "OPENROUTER_API_KEY"
    provider_label = "OpenRouter"

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = OPENROUTER_API_KEY if api_key is None else api_key
        self.api_url = OPENROUTER_API_URL
        self.model = OPENROUTER_IMAGE_MODEL
        self.site_url = OPENROUTER_SITE_URL
        self.app_name = OPENROUTER_APP_NAME

        # Timeout configuration
        self.timeout = OPENROUTER_TIMEOUT

        logger.info(f"OpenRouter API initialized: available={self.is_available()}, model={self.model}, timeout={self.timeout}s")

    def is_available(self) -> bool:
        return bool(self.api_key)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers for OpenRouter API"""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.site_url,
            "X-Title": self.app_name,
        }
        return headers

    def _image_url(self, image: ReferenceImage) -> str:
        """URL for an ``image_url`` block; remote URLs are passed through untouched"""
        source = image.source
        if source.kind == "path":
            data, mime_type = load_image_file(source.value)
            return to_data_uri(data, image.mime_type or mime_type)
        if source.kind == "url":
            return source.value
        mime_type = image.mime_type or mime_type_from_data_uri(source.value) or DEFAULT_MIME_TYPE
        return to_data_uri(source.value, mime_type)

    def build_content(self, request: ImageGenerationRequest) -> Tuple[List[Dict[str, Any]], str]:
        """
        Build the user message content blocks for a request.

        Text first, then reference images in caller order, then the blank
        canvas when an aspect ratio was resolved. Returns the blocks and the
        composed prompt.
        """
        aspect_config = parse_aspect_ratio(request.aspect_ratio)
        prompt = compose_prompt(
            request.prompt,
            scenario=request.scenario,
            aspect_config=aspect_config,
            negative_prompt=request.negative_prompt,
            sample_count=request.sample_count,
        )

        content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]

        for image in request.images:
            content.append({"type": "image_url", "image_url": {"url": self._image_url(image)}})

        # The last image decides the output size
        if aspect_config is not None:
            canvas = generate_canvas_image(aspect_config)
            content.append({
                "type": "image_url",
                "image_url": {"url": f"data:image/png;base64,{canvas}"},
            })

        return content, prompt

    def build_payload(self, content: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": content}],
            "modalities": ["image", "text"],
        }

    def parse_response(self, data: Dict[str, Any]) -> Tuple[List[GeneratedImage], Optional[str], Optional[UsageInfo]]:
        """
        Extract images from the first choice.

        ``message.images`` is the documented location. When it is empty the
        text content is searched for a data URI or, failing that, the first
        http(s) URL, which is assumed to be the image.
        """
        message = data["choices"][0]["message"]
        images = []

        for item in message.get("images") or []:
            url = (item.get("image_url") or {}).get("url")
            if not url:
                continue
            if url.startswith("data:"):
                images.append(GeneratedImage.inline(data=url, format=_data_uri_format(url)))
            else:
                images.append(GeneratedImage.remote(url))

        content = message.get("content")
        if not images and isinstance(content, str) and content:
            if content.startswith("data:image"):
                images.append(GeneratedImage.inline(data=content, format=_data_uri_format(content)))
            else:
                match = _URL_PATTERN.search(content)
                if match:
                    images.append(GeneratedImage.remote(match.group(0)))

        usage = None
        if data.get("usage"):
            usage = UsageInfo(
                input_tokens=data["usage"].get("prompt_tokens"),
                output_tokens=data["usage"].get("completion_tokens"),
                tokens=data["usage"].get("total_tokens"),
            )

        text = content if isinstance(content, str) and content else None
        return images, text, usage

    def generate_image(self, request: ImageGenerationRequest) -> GenerationResult:
        """Generate images through OpenRouter; failures come back as a failed result"""
        if not self.is_available():
            raise ConfigurationError("OPENROUTER_API_KEY environment variable is not set")

        try:
            content, prompt = self.build_content(request)

            logger.debug(f"OpenRouter: Making request to model {self.model} with {len(content)} content blocks")
            response = requests.post(
                self.api_url,
                headers=self._get_headers(),
                json=self.build_payload(content),
                timeout=self.timeout,
            )

            if not response.ok:
                raise APIError(
                    f"OpenRouter API error: {response.status_code} - {response.text}",
                    status_code=response.status_code,
                )

            images, text, usage = self.parse_response(response.json())
            logger.info(f"OpenRouter: Received {len(images)} image(s) from {self.model}")

            return GenerationResult(
                success=True,
                provider=self.provider_label,
                model=self.model,
                prompt=request.prompt,
                enhanced_prompt=prompt,
                images=images,
                message=text or "Image generated successfully",
                usage=usage,
            )

        except (
            requests.exceptions.RequestException,
            ImageProviderError,
            ValueError,
            KeyError,
            IndexError,
            TypeError,
            AttributeError,
            OSError,
        ) as e:
            handle_error(e, {"operation": "openrouter_generate_image", "model": self.model})
            return GenerationResult.failure(
                provider=self.provider_label,
                model=self.model,
                prompt=request.prompt,
                error=str(e),
            )

    def get_model_info(self) -> str:
        return (
            "Gemini 2.5 Flash Image Preview via OpenRouter\n"
            f"• Access through OpenRouter API ({self.model})\n"
            "• Same Nano Banana capabilities\n"
            "• Unified billing through OpenRouter\n"
            "• Support for multiple reference images\n"
            "• Advanced scenario-based generation"
        )


# Create global instance
openrouter_api = OpenRouterAPI()
