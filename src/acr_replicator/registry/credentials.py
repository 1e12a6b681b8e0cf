"""Service principal credentials for the target Azure cloud.

Credentials are built once per invocation from the validated configuration
and are never cached.
"""

__all__ = [
    "AzureCloud",
    "AZURE_CLOUDS",
    "CredentialFactory",
    "ServicePrincipalCredential",
]

from dataclasses import dataclass, field
from typing import Dict, List

from azure.core.credentials import TokenCredential
from azure.identity import AzureAuthorityHosts, ClientSecretCredential

from acr_replicator.common.config import AppConfiguration
from acr_replicator.common.exceptions import AuthenticationError
from acr_replicator.common.logging import get_service_logger

logger = get_service_logger(__name__)


@dataclass(frozen=True)
class AzureCloud:
    """Endpoints of a sovereign Azure cloud.

    Attributes:
        name: Canonical environment name.
        authority_host: Azure Active Directory authority used to issue tokens.
        resource_manager: Azure Resource Manager endpoint.
    """

    name: str
    authority_host: str
    resource_manager: str

    @property
    def credential_scopes(self) -> List[str]:
        return [f"{self.resource_manager}/.default"]

    @property
    def registry_audience(self) -> str:
        """Token audience for the container registry data plane."""
        return self.resource_manager

    @classmethod
    def from_name(cls, name: str) -> "AzureCloud":
        """Look up a cloud by environment name (case-insensitive).

        Raises:
            AuthenticationError: If the name is not a known Azure cloud.
        """
        try:
            return AZURE_CLOUDS[(name or "").strip().lower()]
        except KeyError:
            raise AuthenticationError(
                f"'{name}' is not a known Azure environment. "
                f"Expected one of {sorted({c.name for c in AZURE_CLOUDS.values()})}"
            ) from None


AZURE_PUBLIC_CLOUD = AzureCloud(
    name="AzureGlobalCloud",
    authority_host=AzureAuthorityHosts.AZURE_PUBLIC_CLOUD,
    resource_manager="https://management.azure.com",
)
AZURE_CHINA_CLOUD = AzureCloud(
    name="AzureChinaCloud",
    authority_host=AzureAuthorityHosts.AZURE_CHINA,
    resource_manager="https://management.chinacloudapi.cn",
)
AZURE_US_GOVERNMENT = AzureCloud(
    name="AzureUSGovernment",
    authority_host=AzureAuthorityHosts.AZURE_GOVERNMENT,
    resource_manager="https://management.usgovcloudapi.net",
)
AZURE_GERMAN_CLOUD = AzureCloud(
    name="AzureGermanCloud",
    authority_host="login.microsoftonline.de",
    resource_manager="https://management.microsoftazure.de",
)

AZURE_CLOUDS: Dict[str, AzureCloud] = {
    "azureglobalcloud": AZURE_PUBLIC_CLOUD,
    "azurecloud": AZURE_PUBLIC_CLOUD,
    "azurepubliccloud": AZURE_PUBLIC_CLOUD,
    "azurechinacloud": AZURE_CHINA_CLOUD,
    "azureusgovernment": AZURE_US_GOVERNMENT,
    "azuregermancloud": AZURE_GERMAN_CLOUD,
}


@dataclass
class ServicePrincipalCredential:
    """Service principal identity bound to a target cloud.

    Attributes:
        environment: The cloud the principal authenticates against.
        tenant_id: Tenant of the principal.
        client_id: Application id of the principal.
        client_secret: Client secret of the principal.
        token_credential: Azure SDK credential issuing tokens for the principal.
    """

    environment: AzureCloud
    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)
    token_credential: TokenCredential = field(repr=False)


class CredentialFactory:
    """Builds the service principal credential used by every registry client."""

    def build(self, configuration: AppConfiguration) -> ServicePrincipalCredential:
        """Create a credential for the configured service principal.

        Args:
            configuration (AppConfiguration): A validated configuration.

        Raises:
            AuthenticationError: If the environment name is unknown or the
                credential cannot be constructed.
        """
        environment = AzureCloud.from_name(configuration.target_azure_environment_name)
        tenant_id = configuration.target_azure_service_principal_tenant_id
        client_id = configuration.target_azure_service_principal_client_id
        client_secret = configuration.target_azure_service_principal_client_key

        logger.info(
            f"Building credential for client '{client_id}' in tenant '{tenant_id}' "
            f"of {environment.name}"
        )
        try:
            token_credential = ClientSecretCredential(
                tenant_id=tenant_id,
                client_id=client_id,
                client_secret=client_secret,
                authority=environment.authority_host,
            )
        except ValueError as e:
            raise AuthenticationError(f"Could not build credential for '{client_id}': {e}") from e

        return ServicePrincipalCredential(
            environment=environment,
            tenant_id=tenant_id,  # type: ignore[arg-type]
            client_id=client_id,  # type: ignore[arg-type]
            client_secret=client_secret,  # type: ignore[arg-type]
            token_credential=token_credential,
        )
