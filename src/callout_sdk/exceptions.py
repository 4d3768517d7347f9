"""
Exception classes for the Callout SDK
"""

from typing import Optional, Dict, Any


class CalloutSDKError(Exception):
    """Base exception for all Callout SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ValidationError(CalloutSDKError):
    """Exception raised for malformed caller input"""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class CredentialNotFoundError(CalloutSDKError):
    """Exception raised when an alias is not registered"""

    def __init__(self, alias: str):
        super().__init__(
            f"No named credential registered for alias '{alias}'",
            "CREDENTIAL_NOT_FOUND",
            {'alias': alias}
        )
        self.alias = alias


class AuthenticationError(CalloutSDKError):
    """Exception raised when an auth policy cannot produce credentials"""
    pass


class ConfigurationError(CalloutSDKError):
    """Exception raised for configuration loading and validation errors"""

    def __init__(self, message: str, error_code: str = "CONFIG_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
