"""Registry replication handler.

Provides the entry point invoked for every container registry event and
routes decoded events to the matching replication command.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from acr_replicator.common.config import AppConfiguration
from acr_replicator.common.exceptions import ConfigurationError
from acr_replicator.common.handler import EventHandler, LambdaEvent
from acr_replicator.handlers.replication.commands import (
    DeleteImageCommand,
    ImportImageCommand,
    ReplicationCommand,
)
from acr_replicator.handlers.replication.decoder import decode_event
from acr_replicator.handlers.replication.model import (
    ImageDeleted,
    ImagePushed,
    ReplicationEvent,
    ReplicationResult,
    UnrecognizedEvent,
)
from acr_replicator.registry.credentials import CredentialFactory


@dataclass  # type: ignore[misc] # mypy #5374
class ReplicationDispatcher(EventHandler[ReplicationEvent, ReplicationResult]):
    """Handler replaying registry lifecycle events on the target registry.

    Each invocation validates the configuration and hands the event to the
    first command that handles it. Events no command handles are logged and
    dropped. Nothing is retried here: failures propagate so that the event
    source redelivers the event.

    Attributes:
        configuration: Configuration to use. Loaded from the environment on
            every invocation when not provided.
        commands: Commands to try in order.
        credential_factory: Builds the target service principal credential.

    Example:
        ```python
        handler = ReplicationDispatcher.get_handler()
        # Or with an explicit configuration
        handler = ReplicationDispatcher.get_handler(configuration=configuration)
        ```
    """

    configuration: Optional[AppConfiguration] = None
    commands: List[ReplicationCommand] = field(default_factory=list)
    credential_factory: CredentialFactory = field(default_factory=CredentialFactory)

    def __post_init__(self):
        super().__post_init__()
        if not self.commands:
            self.commands = [ImportImageCommand(), DeleteImageCommand()]

    @classmethod
    def deserialize_request(cls, event: LambdaEvent) -> ReplicationEvent:
        return decode_event(event)  # type: ignore[arg-type]

    def handle(self, request: ReplicationEvent) -> Optional[ReplicationResult]:
        """Replay one decoded event on the target registry.

        Args:
            request (ReplicationEvent): The decoded event.

        Returns:
            The replication result, or None when the event type is not replicated.

        Raises:
            ConfigurationError: If a configuration value is missing.
            ResourceIdentifierError: If the target registry resource id is malformed.
        """
        try:
            configuration = (self.configuration or AppConfiguration.from_env()).validate()
        except ConfigurationError as e:
            self.logger.error(f"Invalid configuration: {e}")
            raise

        if isinstance(request, ImagePushed):
            self.logger.info(
                f"Received a push event for artifact '{request.image_reference}' "
                f"of registry '{request.source_host}'"
            )
        elif isinstance(request, ImageDeleted):
            self.logger.info(
                f"Received a delete event for artifact '{request.image_reference}' "
                f"of registry '{request.source_host}'"
            )

        for command in self.commands:
            if command.should_handle(request):
                self.logger.info(f"{command} handling event {request}")
                # resource id is checked before any credential is built
                command.target_resource_id(configuration)
                credential = self.credential_factory.build(configuration)
                return command.execute(request, configuration, credential)

        event_type = (
            request.event_type
            if isinstance(request, UnrecognizedEvent)
            else request.__class__.__name__
        )
        self.logger.warning(
            "Received an unexpected registry event. Expected a push/delete event. "
            f"Received '{event_type}'"
        )
        return None


handler = ReplicationDispatcher.get_handler()
