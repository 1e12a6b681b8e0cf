"""Deletion of removed manifests from the target registry."""

from dataclasses import dataclass

from azure.core.exceptions import ResourceNotFoundError
from azure.mgmt.containerregistry import ContainerRegistryManagementClient

from acr_replicator.common.config import AppConfiguration
from acr_replicator.common.exceptions import RegistryNotFoundError
from acr_replicator.common.logging import get_service_logger
from acr_replicator.handlers.replication.commands.base import ReplicationCommand, registry_errors
from acr_replicator.handlers.replication.model import (
    ImageDeleted,
    ReplicationAction,
    ReplicationResult,
)
from acr_replicator.registry.credentials import ServicePrincipalCredential
from acr_replicator.registry.resource_id import RegistryResourceId

logger = get_service_logger(__name__)


@dataclass
class DeleteImageCommand(ReplicationCommand[ImageDeleted]):
    """Deletes a removed manifest, addressed by digest, from the target registry.

    A manifest that is already absent on the target counts as deleted.
    """

    def get_login_server(
        self, client: ContainerRegistryManagementClient, resource_id: RegistryResourceId
    ) -> str:
        """Look up the data plane login server of the target registry.

        Raises:
            RegistryNotFoundError: If the target registry does not exist.
        """
        try:
            registry = client.registries.get(
                resource_group_name=resource_id.resource_group_name,
                registry_name=resource_id.registry_name,
            )
        except ResourceNotFoundError as e:
            raise RegistryNotFoundError(f"'{resource_id}' is not found") from e
        if registry is None or not registry.login_server:
            raise RegistryNotFoundError(f"'{resource_id}' is not found")
        return registry.login_server

    def execute(
        self,
        event: ImageDeleted,
        configuration: AppConfiguration,
        credential: ServicePrincipalCredential,
    ) -> ReplicationResult:
        resource_id = self.target_resource_id(configuration)

        with registry_errors(f"looking up registry '{resource_id}'"):
            with self.clients.management_client(credential, resource_id) as client:
                login_server = self.get_login_server(client, resource_id)

        logger.info(f"Deleting '{event.image_reference}' from '{login_server}'")
        with registry_errors(f"deleting '{event.image_reference}' from '{resource_id}'"):
            with self.clients.data_plane_client(credential, login_server) as client:
                try:
                    client.delete_manifest(event.repository, event.digest)
                except ResourceNotFoundError as e:
                    logger.warning(
                        f"Image '{event.image_reference}' is already absent from "
                        f"'{login_server}': {e}"
                    )

        logger.info(f"Image '{event.image_reference}' deleted from registry '{resource_id}'")
        return ReplicationResult(
            action=ReplicationAction.DELETE,
            repository=event.repository,
            reference=event.digest,
            source_registry=event.source_host,
            target_registry=str(resource_id),
        )
