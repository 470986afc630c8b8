"""
Nano Banana MCP Server
Exposes Gemini image generation (direct or through OpenRouter) as MCP tools

Tools Provided:
- generate_image: Generate images from a prompt and optional reference images
- list_providers: List API providers and whether they are configured
- list_scenarios: List the prompt scenarios with descriptions
"""

import asyncio
import json
from typing import Annotated, Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from ai.models.image_models import (
    GenerationResult,
    ImageGenerationRequest,
    ProviderPreference,
    ReferenceImage,
)
from ai.prompts import SCENARIOS, SCENARIO_NAMES
from ai.provider_manager import image_provider_manager
from config import SERVER_NAME
from media.image_saver import format_image_size
from utils.logging_config import get_logger

logger = get_logger(__name__)

PREVIEW_LENGTH = 100

mcp = FastMCP(SERVER_NAME)


def format_image(index: int, image, show_full: bool = False) -> Dict[str, Any]:
    """Client-facing summary of one generated image"""
    if image.type == "base64" and image.data:
        entry = {
            "index": index,
            "type": "base64",
            "size": format_image_size(image.data),
            "format": image.format or "unknown",
        }
        if show_full:
            entry["data"] = image.data
        else:
            entry["preview"] = image.data[:PREVIEW_LENGTH] + "..."
        return entry

    if image.type == "url" and image.url:
        return {"index": index, "type": "url", "url": image.url}

    return image.model_dump(exclude_none=True)


def format_response(result: GenerationResult, show_full: bool = False) -> Dict[str, Any]:
    """
    Convert a generation result into the JSON object returned to MCP clients.

    Base64 payloads are shortened to a preview unless ``show_full`` is set.
    """
    response: Dict[str, Any] = {
        "success": result.success,
        "provider": result.provider,
        "model": result.model,
        "prompt": result.prompt,
    }

    if result.enhanced_prompt:
        response["enhanced_prompt"] = result.enhanced_prompt

    if result.message:
        response["message"] = result.message

    if result.error:
        response["error"] = result.error

    if result.images:
        response["images"] = [
            format_image(index, image, show_full)
            for index, image in enumerate(result.images, start=1)
        ]
        response["image_count"] = len(result.images)

    if result.saved_files:
        response["saved_files"] = result.saved_files

    if result.usage:
        response["usage"] = result.usage.model_dump(exclude_none=True)

    return response


@mcp.tool()
async def generate_image(
    prompt: Annotated[str, Field(description="Text description of the image to generate. Be specific and detailed for best results.")],
    images: Annotated[
        Optional[List[ReferenceImage]],
        Field(description="Reference images for image-to-image generation or style transfer. Supports URLs, file paths, or base64 data."),
    ] = None,
    provider: Annotated[
        ProviderPreference,
        Field(description='API provider to use. "auto" selects the first available provider.'),
    ] = "auto",
    scenario: Annotated[
        Optional[str],
        Field(description="Predefined scenario for optimized prompting: " + ", ".join(SCENARIO_NAMES)),
    ] = None,
    aspect_ratio: Annotated[
        Optional[str],
        Field(description='Desired aspect ratio (e.g., "1:1", "16:9", "9:16", "square", "landscape", "portrait")'),
    ] = None,
    negative_prompt: Annotated[Optional[str], Field(description="Elements to avoid in the generated image")] = None,
    sample_count: Annotated[
        Optional[int],
        Field(ge=1, le=4, description="Number of image variations to generate (model may not always follow exact count)"),
    ] = None,
    save_to_file: Annotated[bool, Field(description="Save generated images to local files")] = False,
    filename: Annotated[
        Optional[str],
        Field(description="Base filename for saved images (without extension). Files will be saved to ./generated_images/ in the client's working directory"),
    ] = None,
    show_full_response: Annotated[
        bool,
        Field(description="Include full base64 data in response (default: false for concise output)"),
    ] = False,
) -> str:
    """Generate images using Nano Banana (Gemini 2.5 Flash Image Preview). Supports text-to-image and image-to-image generation with multiple reference images."""
    request = ImageGenerationRequest(
        prompt=prompt,
        images=images,
        provider=provider,
        scenario=scenario,
        aspect_ratio=aspect_ratio,
        negative_prompt=negative_prompt,
        sample_count=sample_count,
        save_to_file=save_to_file,
        filename=filename,
        show_full_response=show_full_response,
    )

    # Blocking HTTP call, run off the event loop
    result = await asyncio.to_thread(image_provider_manager.generate_image, request)
    return json.dumps(format_response(result, request.show_full_response), indent=2, ensure_ascii=False)


@mcp.tool()
def list_providers() -> str:
    """List available API providers and their status"""
    sections = []
    for status in image_provider_manager.get_provider_status():
        sections.append(
            f"{'✓' if status.available else '✗'} {status.name}\n"
            f"   Environment Variable: {status.env_var}\n"
            f"   Status: {'Configured' if status.available else 'Not configured'}\n"
            f"\n"
            f"   {status.description}"
        )

    return (
        "Available Providers:\n\n"
        + "\n\n".join(sections)
        + "\n\nTo use a provider, set the corresponding environment variable in your MCP client configuration."
    )


@mcp.tool()
def list_scenarios() -> str:
    """List available generation scenarios with descriptions"""
    sections = [
        f"• {scenario['name']}\n  {scenario['description']}\n  Example: \"{scenario['example']}\""
        for scenario in SCENARIOS
    ]

    return (
        "Available Generation Scenarios:\n\n"
        + "\n\n".join(sections)
        + "\n\nUse the 'scenario' parameter when generating images to automatically optimize the prompt for your use case."
        + "\n\nTips for Nano Banana (Gemini 2.5 Flash Image Preview):\n"
        "1. The last reference image determines the final aspect ratio\n"
        "2. Use a blank white image as the second reference to help with background expansion\n"
        "3. Be specific and detailed in your prompts for best results\n"
        "4. Multiple reference images can be combined for complex transformations"
    )


def run_server():
    """Serve the tools over stdio until the client disconnects"""
    logger.info("Nano Banana MCP Server running on stdio")
    mcp.run()
