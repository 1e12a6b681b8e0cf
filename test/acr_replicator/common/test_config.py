from dataclasses import replace
from test.base import RegistryBaseTest

from pytest import mark, param, raises

from acr_replicator.common.config import (
    CONFIG_KEYS,
    SOURCE_ACR_PULL_TOKEN_PASSWORD_KEY,
    TARGET_ACR_RESOURCE_ID_KEY,
    TARGET_AZURE_ENVIRONMENT_NAME_KEY,
    AppConfiguration,
)
from acr_replicator.common.exceptions import ConfigurationError

FULL_CONFIGURATION = AppConfiguration(
    target_azure_environment_name="AzureGlobalCloud",
    target_azure_service_principal_tenant_id="tenant",
    target_azure_service_principal_client_id="client",
    target_azure_service_principal_client_key="secret",
    target_acr_resource_id="/subscriptions/s/resourceGroups/rg/providers/Microsoft.ContainerRegistry/registries/r",
    source_acr_pull_token_name="token",
    source_acr_pull_token_password="password",
)


def test__validate__succeeds_for_full_configuration():
    assert FULL_CONFIGURATION.validate() is FULL_CONFIGURATION
    assert FULL_CONFIGURATION.missing_fields() == []


@mark.parametrize(
    "field_name, value",
    [
        param(name, value, id=f"{key}-{label}")
        for name, key in CONFIG_KEYS.items()
        for label, value in [("none", None), ("empty", ""), ("whitespace", "  ")]
    ],
)
def test__validate__fails_naming_missing_field(field_name, value):
    configuration = replace(FULL_CONFIGURATION, **{field_name: value})

    with raises(ConfigurationError) as exc_info:
        configuration.validate()

    assert CONFIG_KEYS[field_name] in str(exc_info.value)
    assert exc_info.value.missing_fields == [CONFIG_KEYS[field_name]]


def test__validate__reports_first_missing_field_and_lists_all():
    configuration = replace(
        FULL_CONFIGURATION,
        target_azure_environment_name=None,
        target_acr_resource_id="",
        source_acr_pull_token_password=None,
    )

    with raises(ConfigurationError) as exc_info:
        configuration.validate()

    assert str(exc_info.value) == f"'{TARGET_AZURE_ENVIRONMENT_NAME_KEY}' cannot be null or empty"
    assert exc_info.value.missing_fields == [
        TARGET_AZURE_ENVIRONMENT_NAME_KEY,
        TARGET_ACR_RESOURCE_ID_KEY,
        SOURCE_ACR_PULL_TOKEN_PASSWORD_KEY,
    ]


def test__repr__hides_secrets():
    assert "secret" not in repr(FULL_CONFIGURATION)
    assert "password" not in repr(FULL_CONFIGURATION)


class AppConfigurationFromEnvTests(RegistryBaseTest):
    def test__from_env__reads_all_keys(self):
        self.set_configuration_env_vars()

        configuration = AppConfiguration.from_env()

        self.assertEqual(configuration, self.configuration)
        configuration.validate()

    def test__from_env__missing_keys_are_reported_by_validation(self):
        self.set_configuration_env_vars(replace(self.configuration, target_acr_resource_id=None))

        configuration = AppConfiguration.from_env()

        self.assertIsNone(configuration.target_acr_resource_id)
        with self.assertRaises(ConfigurationError):
            configuration.validate()

    def test__from_env__nothing_set(self):
        configuration = AppConfiguration.from_env()

        self.assertListEqual(configuration.missing_fields(), list(CONFIG_KEYS.values()))
