from test.base import RegistryBaseTest
from unittest import mock

from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)

from acr_replicator.common.exceptions import (
    AuthenticationError,
    RegistryNotFoundError,
    RegistryOperationError,
)
from acr_replicator.handlers.replication.commands.delete_image import DeleteImageCommand
from acr_replicator.handlers.replication.model import (
    ImageDeleted,
    ImagePushed,
    ReplicationAction,
    ReplicationResult,
)
from acr_replicator.registry.credentials import AzureCloud, ServicePrincipalCredential


class DeleteImageCommandTests(RegistryBaseTest):
    def setUp(self) -> None:
        super().setUp()
        self.mock_management_client = self.patch_management_client()
        self.mock_data_plane_client = self.patch_data_plane_client()
        self.mock_management_client.registries.get.return_value = mock.MagicMock(
            login_server=self.LOGIN_SERVER
        )
        self.credential = ServicePrincipalCredential(
            environment=AzureCloud.from_name("AzureChinaCloud"),
            tenant_id="tenant",
            client_id="client",
            client_secret="secret",
            token_credential=mock.MagicMock(),
        )
        self.event = ImageDeleted(
            repository="app", digest="sha256:abc", source_host=self.SOURCE_HOST
        )

    def test__should_handle__only_delete_events(self):
        command = DeleteImageCommand()

        self.assertTrue(command.should_handle(self.event))
        self.assertFalse(
            command.should_handle(
                ImagePushed(repository="app", tag="v2", source_host=self.SOURCE_HOST)
            )
        )

    def test__execute__looks_up_registry_then_deletes_by_digest(self):
        result = DeleteImageCommand().execute(self.event, self.configuration, self.credential)

        self.assertEqual(
            result,
            ReplicationResult(
                action=ReplicationAction.DELETE,
                repository="app",
                reference="sha256:abc",
                source_registry=self.SOURCE_HOST,
                target_registry=self.TARGET_RESOURCE_ID,
            ),
        )
        self.mock_management_client.registries.get.assert_called_once_with(
            resource_group_name=self.RESOURCE_GROUP,
            registry_name=self.REGISTRY_NAME,
        )
        self.mock_data_plane_client_cls.assert_called_once_with(
            endpoint=f"https://{self.LOGIN_SERVER}",
            credential=self.credential.token_credential,
            audience="https://management.chinacloudapi.cn",
        )
        self.mock_data_plane_client.delete_manifest.assert_called_once_with("app", "sha256:abc")

    def test__execute__already_absent_manifest_is_success(self):
        self.mock_data_plane_client.delete_manifest.side_effect = ResourceNotFoundError(
            "manifest unknown"
        )

        result = DeleteImageCommand().execute(self.event, self.configuration, self.credential)

        self.assertEqual(result.reference, "sha256:abc")
        self.mock_data_plane_client.delete_manifest.assert_called_once()

    def test__execute__fails_when_registry_not_found(self):
        self.mock_management_client.registries.get.side_effect = ResourceNotFoundError(
            "registry not found"
        )

        with self.assertRaises(RegistryNotFoundError):
            DeleteImageCommand().execute(self.event, self.configuration, self.credential)

        self.mock_data_plane_client_cls.assert_not_called()

    def test__execute__fails_when_registry_has_no_login_server(self):
        self.mock_management_client.registries.get.return_value = None

        with self.assertRaises(RegistryNotFoundError):
            DeleteImageCommand().execute(self.event, self.configuration, self.credential)

        self.mock_data_plane_client_cls.assert_not_called()

    def test__execute__fails_on_lookup_authentication_error(self):
        self.mock_management_client.registries.get.side_effect = ClientAuthenticationError(
            "token rejected"
        )

        with self.assertRaises(AuthenticationError):
            DeleteImageCommand().execute(self.event, self.configuration, self.credential)

    def test__execute__fails_on_delete_error(self):
        self.mock_data_plane_client.delete_manifest.side_effect = HttpResponseError(
            "forbidden"
        )

        with self.assertRaises(RegistryOperationError):
            DeleteImageCommand().execute(self.event, self.configuration, self.credential)
