"""
Exception classes for sitebridge

ConfigurationError is fatal at boot, StateError signals a programming error,
CryptoError is absorbed by the session middleware.
"""
from __future__ import annotations
from typing import Any, Dict, Optional


class SiteBridgeError(Exception):
    """Base exception class for all sitebridge errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(SiteBridgeError):
    """Raised when site configuration is malformed or incomplete."""


class MissingParameterError(ConfigurationError):
    """Raised when a required extra parameter is not provided by any record."""

    def __init__(self, site: str, parameter: str):
        super().__init__(
            message=f"Required parameter [{parameter}] is not given for site: {site}",
            details={"site": site, "parameter": parameter},
        )


class StateError(SiteBridgeError):
    """Raised when the registry is queried before a request is bound."""

    def __init__(self, message: str = "Site registry is not bound to a request"):
        super().__init__(message=message)


class CryptoError(SiteBridgeError):
    """Raised when a session bridge token fails to decrypt or authenticate."""

    def __init__(self, message: str = "Invalid session bridge token"):
        super().__init__(message=message)


class SiteNotFoundError(SiteBridgeError):
    """Raised when URL generation targets a site with no registered domain."""

    def __init__(self, site: str):
        super().__init__(
            message=f"No URL default registered for site: {site}",
            details={"site": site},
        )
