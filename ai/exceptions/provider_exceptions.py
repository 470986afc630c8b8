"""Custom exceptions for the image generation providers"""
from typing import Optional


class ImageProviderError(Exception):
    """Base exception for image provider errors"""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigurationError(ImageProviderError):
    """Exception raised when no usable provider credential is configured"""
    pass


class APIError(ImageProviderError):
    """Exception for non-success responses from a provider API"""
    pass


class ImageSourceError(ImageProviderError):
    """Exception for reference images that cannot be loaded"""
    pass


class ImageSaveError(ImageProviderError):
    """Exception for generated images that cannot be fetched for saving"""
    pass
