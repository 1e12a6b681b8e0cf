"""Import of pushed images into the target registry."""

from dataclasses import dataclass

from azure.mgmt.containerregistry.models import (
    ImportImageParameters,
    ImportMode,
    ImportSource,
    ImportSourceCredentials,
)

from acr_replicator.common.config import AppConfiguration
from acr_replicator.common.logging import get_service_logger
from acr_replicator.handlers.replication.commands.base import ReplicationCommand, registry_errors
from acr_replicator.handlers.replication.model import (
    ImagePushed,
    ReplicationAction,
    ReplicationResult,
)
from acr_replicator.registry.credentials import ServicePrincipalCredential

logger = get_service_logger(__name__)


@dataclass
class ImportImageCommand(ReplicationCommand[ImagePushed]):
    """Imports a pushed `repository:tag` from the source registry.

    The import runs in force mode: an existing tag on the target is
    overwritten, so redelivering the same push event re-imports the image
    instead of failing.

    Example:
        ```python
        command = ImportImageCommand()
        result = command.execute(
            event=ImagePushed(repository="app", tag="v2", source_host="src.azurecr.io"),
            configuration=configuration,
            credential=CredentialFactory().build(configuration),
        )
        ```
    """

    @classmethod
    def build_import_parameters(
        cls, event: ImagePushed, configuration: AppConfiguration
    ) -> ImportImageParameters:
        image_reference = event.image_reference
        return ImportImageParameters(
            source=ImportSource(
                registry_uri=event.source_host,
                source_image=image_reference,
                credentials=ImportSourceCredentials(
                    username=configuration.source_acr_pull_token_name,
                    password=configuration.source_acr_pull_token_password,
                ),
            ),
            target_tags=[image_reference],
            # ImportMode.NO_FORCE fails the import when the tag already exists
            mode=ImportMode.FORCE,
        )

    def execute(
        self,
        event: ImagePushed,
        configuration: AppConfiguration,
        credential: ServicePrincipalCredential,
    ) -> ReplicationResult:
        """Import the pushed image into the target registry and wait for completion.

        Args:
            event (ImagePushed): The push event.
            configuration (AppConfiguration): A validated configuration.
            credential (ServicePrincipalCredential): Credential of the target principal.

        Raises:
            ResourceIdentifierError: If the target registry resource id is malformed.
            AuthenticationError: If the principal cannot authenticate.
            RegistryOperationError: If the registry rejects or fails the import.
        """
        resource_id = self.target_resource_id(configuration)
        parameters = self.build_import_parameters(event, configuration)
        image_reference = event.image_reference

        logger.info(
            f"Importing '{image_reference}' from '{event.source_host}' "
            f"into registry '{resource_id.registry_name}'"
        )
        with registry_errors(f"importing '{image_reference}' into '{resource_id}'"):
            with self.clients.management_client(credential, resource_id) as client:
                poller = client.registries.begin_import_image(
                    resource_group_name=resource_id.resource_group_name,
                    registry_name=resource_id.registry_name,
                    parameters=parameters,
                )
                poller.result()

        logger.info(f"Import of '{image_reference}' success to '{resource_id}'")
        return ReplicationResult(
            action=ReplicationAction.IMPORT,
            repository=event.repository,
            reference=event.tag,
            source_registry=event.source_host,
            target_registry=str(resource_id),
        )
