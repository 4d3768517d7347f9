"""
Named credential registry

Maps credential aliases to base URLs and auth policies. Aliases are resolved
at call time; an unknown alias fails when the callout is made, not when a
client is constructed.
"""

import os
import logging
import threading
from typing import Dict, List, Optional
from urllib.parse import urlparse
from dataclasses import dataclass, field

from requests.auth import AuthBase

from ..exceptions import CredentialNotFoundError, ValidationError
from .auth import AuthPolicy, NoAuth

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "CALLOUT_CONFIG_FILE"


@dataclass
class NamedCredential:
    """A registered external endpoint."""
    name: str
    base_url: str
    auth: AuthPolicy = field(default_factory=NoAuth)

    def __post_init__(self):
        """Validate and normalize the credential."""
        if not self.name:
            raise ValidationError("Credential name cannot be empty")

        if not self.base_url:
            raise ValidationError("Credential base_url cannot be empty")

        # Paths are appended directly to the base URL
        if not self.base_url.endswith('/'):
            self.base_url += '/'

        parsed = urlparse(self.base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValidationError(f"Invalid credential URL format: {self.base_url}")


@dataclass(frozen=True)
class ResolvedEndpoint:
    """Dispatchable endpoint produced by the registry."""
    alias: str
    base_url: str
    auth: Optional[AuthBase] = None


class CredentialRegistry:
    """Thread-safe in-memory registry of named credentials"""

    def __init__(self, credentials: Optional[List[NamedCredential]] = None):
        self._credentials: Dict[str, NamedCredential] = {}
        self._lock = threading.RLock()
        for credential in credentials or []:
            self.register(credential)

    def register(self, credential: NamedCredential) -> None:
        """Register or replace a credential."""
        with self._lock:
            replaced = credential.name in self._credentials
            self._credentials[credential.name] = credential
        logger.info(
            f"{'Replaced' if replaced else 'Registered'} named credential "
            f"'{credential.name}' -> {credential.base_url}"
        )

    def unregister(self, alias: str) -> bool:
        """Remove a credential. Returns False if it was not registered."""
        with self._lock:
            removed = self._credentials.pop(alias, None) is not None
        if removed:
            logger.debug(f"Unregistered named credential '{alias}'")
        return removed

    def get(self, alias: str) -> NamedCredential:
        """Look up a credential by alias."""
        if not alias:
            raise ValidationError("Credential alias cannot be empty")
        with self._lock:
            credential = self._credentials.get(alias)
        if credential is None:
            raise CredentialNotFoundError(alias)
        return credential

    def resolve(self, alias: str) -> ResolvedEndpoint:
        """
        Resolve an alias to a base URL and auth handler.

        Args:
            alias: Credential alias

        Returns:
            ResolvedEndpoint: Base URL (separator-terminated) and auth

        Raises:
            ValidationError: If the alias is empty
            CredentialNotFoundError: If the alias is not registered
        """
        credential = self.get(alias)
        return ResolvedEndpoint(
            alias=credential.name,
            base_url=credential.base_url,
            auth=credential.auth.build_auth()
        )

    def aliases(self) -> List[str]:
        """Registered aliases, sorted."""
        with self._lock:
            return sorted(self._credentials)

    def clear(self) -> None:
        """Remove every credential."""
        with self._lock:
            self._credentials.clear()

    def __contains__(self, alias: object) -> bool:
        with self._lock:
            return alias in self._credentials

    def __len__(self) -> int:
        with self._lock:
            return len(self._credentials)


_default_registry: Optional[CredentialRegistry] = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> CredentialRegistry:
    """
    Get the process-wide credential registry.

    On first use the registry is populated from the configuration file named
    by CALLOUT_CONFIG_FILE, when that variable is set.

    Returns:
        CredentialRegistry: Shared registry
    """
    global _default_registry

    with _default_registry_lock:
        if _default_registry is None:
            config_path = os.environ.get(CONFIG_FILE_ENV_VAR)
            if config_path:
                from ..config import CalloutConfig
                _default_registry = CalloutConfig.from_file(config_path).build_registry()
                logger.info(f"Loaded default credential registry from {config_path}")
            else:
                _default_registry = CredentialRegistry()
        return _default_registry


def reset_default_registry() -> None:
    """Drop the process-wide registry so the next lookup reloads it."""
    global _default_registry
    with _default_registry_lock:
        _default_registry = None
