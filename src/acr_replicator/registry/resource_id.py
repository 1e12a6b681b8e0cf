__all__ = ["RegistryResourceId", "REGISTRY_RESOURCE_ID_PATTERN"]

import re
from typing import ClassVar

from aibs_informatics_core.collections import ValidatedStr

from acr_replicator.common.exceptions import ResourceIdentifierError

REGISTRY_RESOURCE_ID_PATTERN = re.compile(
    r"/subscriptions/(?P<subscription_id>[^/]+)"
    r"/resourceGroups/(?P<resource_group_name>[^/]+)"
    r"/(?:[^/]+/)*?registries/(?P<registry_name>[^/]+)/?",
    re.IGNORECASE,
)


class RegistryResourceId(ValidatedStr):
    """Azure resource id of a container registry.

    /subscriptions/{sub}/resourceGroups/{rg}/providers/Microsoft.ContainerRegistry/registries/{name}
    """

    regex_pattern: ClassVar[re.Pattern] = REGISTRY_RESOURCE_ID_PATTERN

    @classmethod
    def from_string(cls, value: str) -> "RegistryResourceId":
        """Parse a registry resource id.

        Raises:
            ResourceIdentifierError: If the value does not have the expected shape.
        """
        if not value or not cls.regex_pattern.fullmatch(value):
            raise ResourceIdentifierError(
                f"'{value}' is not a valid container registry resource id. Expected "
                "/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}"
                "/providers/Microsoft.ContainerRegistry/registries/{registryName}"
            )
        return cls(value)

    @property
    def subscription_id(self) -> str:
        return self.get_match_groups()[0]

    @property
    def resource_group_name(self) -> str:
        return self.get_match_groups()[1]

    @property
    def registry_name(self) -> str:
        return self.get_match_groups()[2]
