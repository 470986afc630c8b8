"""
Error handling utilities for the Nano Banana MCP server.
"""

import json
import logging
import re
from datetime import datetime
from typing import Optional, Dict, Any
from enum import Enum

import requests

from ai.exceptions.provider_exceptions import (
    APIError,
    ConfigurationError,
    ImageSaveError,
    ImageSourceError,
)
from utils.logging_config import get_logger

logger = get_logger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories."""
    CONFIGURATION = "configuration"
    NETWORK = "network"
    API = "api"
    PARSING = "parsing"
    PERSISTENCE = "persistence"
    UNKNOWN = "unknown"


class SanitizedError:
    """Sanitized error representation."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        error_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.category = category
        self.severity = severity
        self.error_id = error_id or f"ERR_{datetime.now().strftime('%H%M%S')}"
        self.context = context or {}
        self.original_error = original_error
        self.timestamp = datetime.now()


def sanitize_error_message(error_message: str) -> str:
    """
    Remove credentials from error messages before they are logged.

    Args:
        error_message: Raw error message

    Returns:
        Sanitized error message
    """
    if not error_message:
        return "An error occurred"

    sanitized = error_message

    # Google API keys, OpenRouter keys and bearer tokens
    sanitized = re.sub(r'AIza[0-9A-Za-z_\-]{20,}', '[KEY]', sanitized)
    sanitized = re.sub(r'sk-[A-Za-z0-9\-]{20,}', '[KEY]', sanitized)
    sanitized = re.sub(r'Bearer\s+[^\s"]+', 'Bearer [KEY]', sanitized)

    # Inline image payloads would flood the log
    sanitized = re.sub(r'data:[^;\s]+;base64,[A-Za-z0-9+/=]+', '[DATA_URI]', sanitized)

    # Clean up and limit length
    sanitized = re.sub(r'\s+', ' ', sanitized).strip()

    if len(sanitized) > 500:
        sanitized = sanitized[:497] + "..."

    return sanitized or "Sanitized error message"


def categorize_error(error: Exception, context: Optional[Dict[str, Any]] = None) -> ErrorCategory:
    """
    Categorize an error based on type and context.

    Args:
        error: The exception to categorize
        context: Additional context

    Returns:
        ErrorCategory
    """
    # Check context first
    if context:
        operation = context.get('operation', '').lower()
        if 'save' in operation:
            return ErrorCategory.PERSISTENCE

    if isinstance(error, ConfigurationError):
        return ErrorCategory.CONFIGURATION
    if isinstance(error, ImageSaveError):
        return ErrorCategory.PERSISTENCE
    if isinstance(error, APIError):
        return ErrorCategory.API
    # requests' JSONDecodeError is also a RequestException
    if isinstance(error, (json.JSONDecodeError, requests.exceptions.JSONDecodeError, KeyError, IndexError, TypeError, AttributeError)):
        return ErrorCategory.PARSING
    if isinstance(error, (requests.exceptions.RequestException, ImageSourceError)):
        return ErrorCategory.NETWORK
    if isinstance(error, OSError):
        return ErrorCategory.PERSISTENCE

    return ErrorCategory.UNKNOWN


def determine_severity(error: Exception, category: ErrorCategory) -> ErrorSeverity:
    """
    Determine error severity.

    Args:
        error: The exception
        category: Error category

    Returns:
        ErrorSeverity
    """
    if category == ErrorCategory.CONFIGURATION:
        return ErrorSeverity.HIGH
    if category == ErrorCategory.PARSING:
        return ErrorSeverity.HIGH
    if category in [ErrorCategory.API, ErrorCategory.NETWORK, ErrorCategory.PERSISTENCE]:
        return ErrorSeverity.MEDIUM
    if category == ErrorCategory.UNKNOWN:
        return ErrorSeverity.HIGH

    return ErrorSeverity.MEDIUM


def handle_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
) -> SanitizedError:
    """
    Log an error and return a categorized, sanitized description of it.

    Args:
        error: The exception to handle
        context: Additional context information (for example the operation name)

    Returns:
        SanitizedError instance
    """
    category = categorize_error(error, context)
    severity = determine_severity(error, category)

    sanitized_error = SanitizedError(
        message=sanitize_error_message(str(error)),
        category=category,
        severity=severity,
        context=context,
        original_error=error
    )

    log_level = {
        ErrorSeverity.LOW: logging.INFO,
        ErrorSeverity.MEDIUM: logging.WARNING,
        ErrorSeverity.HIGH: logging.ERROR,
        ErrorSeverity.CRITICAL: logging.CRITICAL
    }.get(severity, logging.WARNING)

    logger.log(
        log_level,
        f"Error {sanitized_error.error_id} [{category.value}]: "
        f"{type(error).__name__}: {sanitized_error.message} | "
        f"Context: {context}"
    )

    return sanitized_error
