__all__ = ["RegistryClientFactory"]

from azure.containerregistry import ContainerRegistryClient
from azure.mgmt.containerregistry import ContainerRegistryManagementClient

from acr_replicator.registry.credentials import ServicePrincipalCredential
from acr_replicator.registry.resource_id import RegistryResourceId


class RegistryClientFactory:
    """Builds Azure SDK clients for the target registry.

    Both clients authenticate as the configured service principal against
    the cloud the credential is bound to.
    """

    def management_client(
        self, credential: ServicePrincipalCredential, resource_id: RegistryResourceId
    ) -> ContainerRegistryManagementClient:
        """Create a management plane client scoped to the registry's subscription."""
        return ContainerRegistryManagementClient(
            credential=credential.token_credential,
            subscription_id=resource_id.subscription_id,
            base_url=credential.environment.resource_manager,
            credential_scopes=credential.environment.credential_scopes,
        )

    def data_plane_client(
        self, credential: ServicePrincipalCredential, login_server: str
    ) -> ContainerRegistryClient:
        """Create a data plane client for the registry's login server."""
        return ContainerRegistryClient(
            endpoint=f"https://{login_server}",
            credential=credential.token_credential,
            audience=credential.environment.registry_audience,
        )
