"""Application configuration.

Settings are read from environment variables once per invocation and are
read-only afterwards.
"""

__all__ = [
    "AppConfiguration",
    "TARGET_AZURE_ENVIRONMENT_NAME_KEY",
    "TARGET_AZURE_SERVICE_PRINCIPAL_TENANT_ID_KEY",
    "TARGET_AZURE_SERVICE_PRINCIPAL_CLIENT_ID_KEY",
    "TARGET_AZURE_SERVICE_PRINCIPAL_CLIENT_KEY_KEY",
    "TARGET_ACR_RESOURCE_ID_KEY",
    "SOURCE_ACR_PULL_TOKEN_NAME_KEY",
    "SOURCE_ACR_PULL_TOKEN_PASSWORD_KEY",
]

from dataclasses import dataclass, field, fields
from typing import List, Optional

from aibs_informatics_core.utils.os_operations import get_env_var

from acr_replicator.common.exceptions import ConfigurationError

TARGET_AZURE_ENVIRONMENT_NAME_KEY = "TargetAzureEnvironmentName"
TARGET_AZURE_SERVICE_PRINCIPAL_TENANT_ID_KEY = "TargetAzureServicePrincipalTenantId"
TARGET_AZURE_SERVICE_PRINCIPAL_CLIENT_ID_KEY = "TargetAzureServicePrincipalClientId"
TARGET_AZURE_SERVICE_PRINCIPAL_CLIENT_KEY_KEY = "TargetAzureServicePrincipalClientKey"
TARGET_ACR_RESOURCE_ID_KEY = "TargetACRResourceId"
SOURCE_ACR_PULL_TOKEN_NAME_KEY = "SourceACRPullTokenName"
SOURCE_ACR_PULL_TOKEN_PASSWORD_KEY = "SourceACRPullTokenPassword"

# Field order determines which missing key is reported first.
CONFIG_KEYS = {
    "target_azure_environment_name": TARGET_AZURE_ENVIRONMENT_NAME_KEY,
    "target_azure_service_principal_tenant_id": TARGET_AZURE_SERVICE_PRINCIPAL_TENANT_ID_KEY,
    "target_azure_service_principal_client_id": TARGET_AZURE_SERVICE_PRINCIPAL_CLIENT_ID_KEY,
    "target_azure_service_principal_client_key": TARGET_AZURE_SERVICE_PRINCIPAL_CLIENT_KEY_KEY,
    "target_acr_resource_id": TARGET_ACR_RESOURCE_ID_KEY,
    "source_acr_pull_token_name": SOURCE_ACR_PULL_TOKEN_NAME_KEY,
    "source_acr_pull_token_password": SOURCE_ACR_PULL_TOKEN_PASSWORD_KEY,
}


@dataclass(frozen=True)
class AppConfiguration:
    """Settings used to replicate images into the target registry.

    Attributes:
        target_azure_environment_name: Azure cloud of the target registry
            (e.g. AzureGlobalCloud, AzureChinaCloud).
        target_azure_service_principal_tenant_id: Tenant of the service principal.
        target_azure_service_principal_client_id: Application id of a service
            principal with Contributor rights on the target registry.
        target_azure_service_principal_client_key: Client secret of that application.
        target_acr_resource_id: Resource id of the target registry, in the form
            /subscriptions/{sub}/resourceGroups/{rg}/providers/Microsoft.ContainerRegistry/registries/{name}
        source_acr_pull_token_name: Name of a pull-only token on the source registry.
        source_acr_pull_token_password: Password of the pull token.
    """

    target_azure_environment_name: Optional[str] = None
    target_azure_service_principal_tenant_id: Optional[str] = None
    target_azure_service_principal_client_id: Optional[str] = None
    target_azure_service_principal_client_key: Optional[str] = field(default=None, repr=False)
    target_acr_resource_id: Optional[str] = None
    source_acr_pull_token_name: Optional[str] = None
    source_acr_pull_token_password: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> "AppConfiguration":
        """Read every configuration key from the environment.

        Absent keys are left as None and reported by `validate`.
        """
        return cls(**{name: get_env_var(key) for name, key in CONFIG_KEYS.items()})

    def missing_fields(self) -> List[str]:
        """List the configuration keys that are unset, empty or whitespace."""
        return [
            CONFIG_KEYS[f.name]
            for f in fields(self)
            if not (getattr(self, f.name) or "").strip()
        ]

    def validate(self) -> "AppConfiguration":
        """Check that every setting is present.

        Returns:
            The configuration itself, for chaining.

        Raises:
            ConfigurationError: Naming the first missing key. All missing keys
                are available on `missing_fields`.
        """
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(
                f"'{missing[0]}' cannot be null or empty", missing_fields=missing
            )
        return self
