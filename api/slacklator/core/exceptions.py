"""
Custom exception hierarchy for the Slacklator translation core.

Only ProviderError is meant to reach end users. Detection and storage
errors are caught inside the core and degrade to best-effort fallbacks.
"""

from typing import Optional


class SlacklatorError(Exception):
    """Base exception for all translation core errors."""

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code or self.__class__.__name__


# Provider Exceptions


class ProviderError(SlacklatorError):
    """Raised when the translation provider fails (network, auth, quota)."""

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(
            f"Translation provider failed: {detail}",
            error_code=error_code or "PROVIDER_ERROR",
        )


class ProviderDetectError(ProviderError):
    """Raised when a detect-only provider request fails.

    LanguageDetector swallows this and returns the fallback language.
    """

    def __init__(self, detail: str):
        super().__init__(detail, error_code="PROVIDER_DETECT_ERROR")


class ProviderQuotaError(ProviderError):
    """Raised when the provider's character quota is exhausted."""

    def __init__(self, detail: str = "character quota exceeded"):
        super().__init__(detail, error_code="PROVIDER_QUOTA_EXCEEDED")


# Storage Exceptions


class PersistentStoreError(SlacklatorError):
    """Raised when the persistent store is unavailable or a call fails."""

    def __init__(self, detail: str, operation: str):
        # Map to controlled vocabulary to prevent high cardinality
        operation_map = {
            "get": "READ",
            "set": "WRITE",
            "set_with_expiry": "WRITE",
            "connect": "CONNECT",
        }
        normalized_op = operation_map.get(operation.lower(), "UNKNOWN")
        super().__init__(
            f"Persistent store {operation} failed: {detail}",
            error_code=f"STORE_{normalized_op}_ERROR",
        )
        self.operation = operation


# Configuration Exceptions


class ConfigurationError(SlacklatorError):
    """Raised when a required setting is missing or invalid."""

    def __init__(self, setting: str, detail: str):
        super().__init__(
            f"Invalid configuration for {setting}: {detail}",
            error_code="CONFIGURATION_ERROR",
        )
        self.setting = setting
