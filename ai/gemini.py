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
    UsageInfo,
)
from ai.prompts import compose_prompt
from config import GEMINI_API_KEY, GEMINI_API_URL, GEMINI_MODEL, GEMINI_TIMEOUT
from media.aspect_ratio import parse_aspect_ratio
from media.canvas import generate_canvas_image
from media.image_loader import resolve_inline_image
from utils.error_handler import handle_error

# Configure logging
from utils.logging_config import get_logger

logger = get_logger(__name__)


class GeminiAPI:
    """Gemini image generation through the direct Google API"""

    name = "Gemini Direct API"
    key = "gemini"
    env_var = "GEMINI_API_KEY"
    provider_label = "Gemini Direct"

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = GEMINI_API_KEY if api_key is None else api_key
        self.api_url = GEMINI_API_URL
        self.model = GEMINI_MODEL
        self.timeout = GEMINI_TIMEOUT

        logger.info(f"Gemini API initialized: available={self.is_available()}, model={self.model}")

    def is_available(self) -> bool:
        return bool(self.api_key)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers for the Gemini API"""
        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    def build_parts(self, request: ImageGenerationRequest) -> Tuple[List[Dict[str, Any]], str]:
        """
        Build the ordered ``parts`` list for a request.

        The composed prompt comes first, then one inline image per reference
        image in caller order, then the blank canvas when an aspect ratio was
        resolved. The canvas has to stay last since Gemini sizes its output
        after the last image.

        Returns:
            The parts list and the composed prompt text.
        """
        aspect_config = parse_aspect_ratio(request.aspect_ratio)
        prompt = compose_prompt(
            request.prompt,
            scenario=request.scenario,
            aspect_config=aspect_config,
            negative_prompt=request.negative_prompt,
            sample_count=request.sample_count,
        )

        parts: List[Dict[str, Any]] = [{"text": prompt}]

        for image in request.images:
            data, mime_type = resolve_inline_image(image)
            parts.append({"inline_data": {"mime_type": mime_type, "data": data}})

        if aspect_config is not None:
            parts.append({
                "inline_data": {
                    "mime_type": "image/png",
                    "data": generate_canvas_image(aspect_config),
                }
            })

        return parts, prompt

    def parse_response(self, data: Dict[str, Any]) -> Tuple[List[GeneratedImage], Optional[str], Optional[UsageInfo]]:
        """Collect every inline image from every candidate, in order."""
        images = []
        texts = []

        for candidate in data.get("candidates") or []:
            content = candidate.get("content") or {}
            for part in content.get("parts") or []:
                # The REST API answers in camelCase; older payloads used snake_case
                inline = part.get("inline_data") or part.get("inlineData")
                if inline:
                    if not inline.get("data"):
                        continue
                    mime_type = inline.get("mime_type") or inline.get("mimeType") or "image/png"
                    images.append(GeneratedImage.inline(
                        data=f"data:{mime_type};base64,{inline['data']}",
                        format=mime_type.split("/")[-1] or "png",
                    ))
                elif part.get("text"):
                    texts.append(part["text"])

        usage = None
        metadata = data.get("usageMetadata")
        if metadata:
            usage = UsageInfo(
                input_tokens=metadata.get("promptTokenCount"),
                output_tokens=metadata.get("candidatesTokenCount"),
                tokens=metadata.get("totalTokenCount"),
            )

        message = " ".join(texts) if texts else None
        return images, message, usage

    def generate_image(self, request: ImageGenerationRequest) -> GenerationResult:
        """Generate images with Gemini; failures come back as a failed result"""
        if not self.is_available():
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set")

        try:
            parts, prompt = self.build_parts(request)

            logger.debug(f"Gemini: Sending request with {len(parts)} parts to {self.model}")
            response = requests.post(
                self.api_url,
                headers=self._get_headers(),
                json={"contents": [{"parts": parts}]},
                timeout=self.timeout,
            )

            if not response.ok:
                raise APIError(
                    f"Gemini API error: {response.status_code} - {response.text}",
                    status_code=response.status_code,
                )

            images, message, usage = self.parse_response(response.json())
            logger.info(f"Gemini: Received {len(images)} image(s) from {self.model}")

            return GenerationResult(
                success=True,
                provider=self.provider_label,
                model=self.model,
                prompt=request.prompt,
                enhanced_prompt=prompt,
                images=images,
                message=message or "Image generated successfully",
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
            handle_error(e, {"operation": "gemini_generate_image", "model": self.model})
            return GenerationResult.failure(
                provider=self.provider_label,
                model=self.model,
                prompt=request.prompt,
                error=str(e),
            )

    def get_model_info(self) -> str:
        return (
            "Gemini 2.5 Flash Image Preview (Nano Banana)\n"
            f"• Direct Google API access ({self.model})\n"
            "• Advanced image generation with reference image support\n"
            "• Multi-modal understanding\n"
            "• Aspect ratio control through a blank canvas hint\n"
            "• Style transfer and image manipulation capabilities"
        )


# Create global instance
gemini_api = GeminiAPI()
