"""Exceptions raised while replicating registry events.

Every error except `DecodeError` is fatal for the invocation and propagates
out of the handler, leaving retries to the event delivery mechanism.
"""

__all__ = [
    "ReplicationError",
    "ConfigurationError",
    "DecodeError",
    "ResourceIdentifierError",
    "AuthenticationError",
    "RegistryNotFoundError",
    "RegistryOperationError",
]

from typing import List, Optional

from aibs_informatics_core.exceptions import ApplicationException


class ReplicationError(ApplicationException):
    """Base class for all replication errors."""


class ConfigurationError(ReplicationError):
    """A required configuration value is missing.

    Attributes:
        missing_fields: Every missing configuration key, in validation order.
    """

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class DecodeError(ReplicationError):
    """The inbound event could not be decoded."""


class ResourceIdentifierError(ReplicationError, ValueError):
    """The target registry resource id is malformed."""


class AuthenticationError(ReplicationError):
    """Credentials could not be built or were rejected."""


class RegistryNotFoundError(ReplicationError):
    """The target registry does not exist."""


class RegistryOperationError(ReplicationError):
    """An import or delete call against the target registry failed."""
