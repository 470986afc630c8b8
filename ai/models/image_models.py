"""Pydantic models for image generation requests and responses"""
from typing import List, Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from utils.logging_config import get_logger

logger = get_logger(__name__)

ProviderPreference = Literal["gemini", "openrouter", "auto"]


class ImageSource(NamedTuple):
    """Resolved source of a reference image"""
    kind: Literal["path", "url", "base64"]
    value: str


class ReferenceImage(BaseModel):
    """Reference image supplied by the caller.

    Exactly one source is used per image. When several are set the first one
    in path, url, base64 order wins.
    """
    model_config = ConfigDict(populate_by_name=True)

    path: Optional[str] = Field(
        default=None,
        description="Local file path to the reference image (e.g., ./images/photo.jpg)",
    )
    url: Optional[str] = Field(default=None, description="URL of the reference image")
    base64: Optional[str] = Field(default=None, description="Base64-encoded image data")
    mime_type: Optional[str] = Field(
        default=None,
        alias="mimeType",
        description="MIME type of the image (e.g., image/png, image/jpeg)",
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional description of what this reference image represents",
    )

    @property
    def source(self) -> Optional[ImageSource]:
        if self.path:
            return ImageSource("path", self.path)
        if self.url:
            return ImageSource("url", self.url)
        if self.base64:
            return ImageSource("base64", self.base64)
        return None


class ImageGenerationRequest(BaseModel):
    """Request model for image generation"""
    prompt: str = Field(min_length=1)
    images: List[ReferenceImage] = Field(default_factory=list)
    provider: ProviderPreference = "auto"
    scenario: Optional[str] = None
    aspect_ratio: Optional[str] = None
    negative_prompt: Optional[str] = None
    sample_count: Optional[int] = Field(default=None, ge=1, le=4)
    save_to_file: bool = False
    filename: Optional[str] = None
    show_full_response: bool = False

    @field_validator("images", mode="before")
    @classmethod
    def _default_images(cls, value):
        return value if value is not None else []

    @field_validator("images")
    @classmethod
    def _drop_sourceless_images(cls, images: List[ReferenceImage]) -> List[ReferenceImage]:
        kept = [image for image in images if image.source is not None]
        if len(kept) != len(images):
            logger.debug(f"Dropped {len(images) - len(kept)} reference image(s) without a source")
        return kept


class GeneratedImage(BaseModel):
    """Image returned by a provider, either inline base64 data or a remote URL"""
    model_config = ConfigDict(frozen=True)

    type: Literal["base64", "url"]
    data: Optional[str] = None
    url: Optional[str] = None
    format: Optional[str] = None

    @classmethod
    def inline(cls, data: str, format: Optional[str] = None) -> "GeneratedImage":
        return cls(type="base64", data=data, format=format)

    @classmethod
    def remote(cls, url: str) -> "GeneratedImage":
        return cls(type="url", url=url)


class UsageInfo(BaseModel):
    """Token usage reported by a provider"""
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    tokens: Optional[int] = None


class GenerationResult(BaseModel):
    """Normalized result shared by every provider"""
    success: bool
    provider: str
    model: str
    prompt: str
    enhanced_prompt: Optional[str] = None
    message: Optional[str] = None
    images: List[GeneratedImage] = Field(default_factory=list)
    saved_files: Optional[List[str]] = None
    usage: Optional[UsageInfo] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "GenerationResult":
        if self.success and self.error is not None:
            raise ValueError("successful results cannot carry an error")
        if not self.success:
            if not self.error:
                raise ValueError("failed results must carry an error message")
            if self.images:
                raise ValueError("failed results cannot carry images")
        return self

    @classmethod
    def failure(cls, provider: str, model: str, prompt: str, error: str) -> "GenerationResult":
        return cls(
            success=False,
            provider=provider,
            model=model,
            prompt=prompt,
            error=error or "Unknown error",
        )
