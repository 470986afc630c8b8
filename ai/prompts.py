"""Prompt composition for image generation requests.

Clause order matters to the backends and is fixed:
scenario prefix, base prompt, aspect clause, negative clause, and the
variations wrapper around all of it.
"""
from typing import Dict, List, Optional

from media.aspect_ratio import AspectRatioConfig, describe_aspect_ratio

SCENARIO_PREFIXES: Dict[str, str] = {
    "style-transfer": "Apply the artistic style from the reference image(s) to: ",
    "character-design": "Create a character design sheet showing multiple views and poses for: ",
    "pose-modification": "Modify the pose of the subject while maintaining their appearance: ",
    "background-expansion": "Expand or modify the background while keeping the main subject: ",
    "multi-reference": "Combine elements from all reference images to create: ",
    "cross-view": "Generate different viewing angles or perspectives of: ",
    "ar-overlay": "Add augmented reality information overlays to: ",
    "photo-enhancement": "Enhance and improve the quality of: ",
}

SCENARIOS: List[Dict[str, str]] = [
    {
        "name": "text-to-image",
        "description": "Generate an image from text description only",
        "example": "A futuristic city at sunset with flying cars",
    },
    {
        "name": "style-transfer",
        "description": "Apply the artistic style of reference image(s) to new content",
        "example": "Apply Van Gogh's Starry Night style to a photo of a modern city",
    },
    {
        "name": "character-design",
        "description": "Create character sheets with multiple views and poses",
        "example": "Design a cyberpunk warrior character with front, side, and back views",
    },
    {
        "name": "pose-modification",
        "description": "Change the pose of a subject while maintaining appearance",
        "example": "Make the person in this photo appear to be jumping",
    },
    {
        "name": "background-expansion",
        "description": "Expand or replace backgrounds while keeping the main subject",
        "example": "Extend the background to show more of the landscape",
    },
    {
        "name": "multi-reference",
        "description": "Combine elements from multiple reference images",
        "example": "Combine the clothing from image 1 with the pose from image 2",
    },
    {
        "name": "cross-view",
        "description": "Generate different viewing angles or perspectives",
        "example": "Show this object from a bird's eye view",
    },
    {
        "name": "ar-overlay",
        "description": "Add augmented reality information overlays",
        "example": "Add holographic UI elements to this scene",
    },
    {
        "name": "photo-enhancement",
        "description": "Enhance and improve photo quality",
        "example": "Enhance the lighting and colors in this photo",
    },
]

SCENARIO_NAMES = [scenario["name"] for scenario in SCENARIOS]


def apply_scenario(prompt: str, scenario: Optional[str]) -> str:
    """Prefix the prompt for a scenario; unknown or missing tags add nothing."""
    if not scenario:
        return prompt
    return SCENARIO_PREFIXES.get(scenario, "") + prompt


def compose_prompt(
    prompt: str,
    scenario: Optional[str] = None,
    aspect_config: Optional[AspectRatioConfig] = None,
    negative_prompt: Optional[str] = None,
    sample_count: Optional[int] = None,
) -> str:
    """Build the instruction text sent to the backend."""
    composed = apply_scenario(prompt, scenario)

    if aspect_config is not None:
        composed += (
            f" Generate the image to fill the entire {describe_aspect_ratio(aspect_config)}"
            " canvas provided by the blank image."
        )

    if negative_prompt:
        composed += f" Avoid: {negative_prompt}."

    if sample_count and sample_count > 1:
        composed = f"Generate {sample_count} variations of: {composed}"

    return composed
