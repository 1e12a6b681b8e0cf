from abc import abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generic, Iterator, Type, TypeVar

from azure.core.exceptions import AzureError, ClientAuthenticationError

from acr_replicator.common.config import AppConfiguration
from acr_replicator.common.exceptions import AuthenticationError, RegistryOperationError
from acr_replicator.handlers.replication.model import ReplicationEvent, ReplicationResult
from acr_replicator.registry.clients import RegistryClientFactory
from acr_replicator.registry.credentials import ServicePrincipalCredential
from acr_replicator.registry.resource_id import RegistryResourceId

EVENT = TypeVar("EVENT", bound=ReplicationEvent)  # type: ignore[misc]


@dataclass
class ReplicationCommand(Generic[EVENT]):
    """Base class for commands replaying one event type on the target registry.

    Example Usage:

    `
    @dataclass
    class ImportImageCommand(ReplicationCommand[ImagePushed]):
        def execute(self, event, configuration, credential) -> ReplicationResult:
            ...
    `

    Attributes:
        clients: Factory for the Azure SDK clients of the target registry.
    """

    clients: RegistryClientFactory = field(default_factory=RegistryClientFactory)

    @classmethod
    def event_class(cls) -> Type[EVENT]:
        return cls.__orig_bases__[0].__args__[0]  # type: ignore

    def should_handle(self, event: ReplicationEvent) -> bool:
        return isinstance(event, self.event_class())

    @abstractmethod
    def execute(
        self,
        event: EVENT,
        configuration: AppConfiguration,
        credential: ServicePrincipalCredential,
    ) -> ReplicationResult:
        raise NotImplementedError("Please implement `execute` method")  # pragma: no cover

    @classmethod
    def target_resource_id(cls, configuration: AppConfiguration) -> RegistryResourceId:
        return RegistryResourceId.from_string(configuration.target_acr_resource_id or "")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}"


@contextmanager
def registry_errors(operation: str) -> Iterator[None]:
    """Translate Azure SDK errors raised while calling the target registry.

    Args:
        operation (str): Description of the call, used in error messages.

    Raises:
        AuthenticationError: If a token could not be acquired or was rejected.
        RegistryOperationError: For any other Azure SDK error.
    """
    try:
        yield
    except ClientAuthenticationError as e:
        raise AuthenticationError(f"Authentication failed while {operation}: {e}") from e
    except AzureError as e:
        raise RegistryOperationError(f"Failed {operation}: {e}") from e
