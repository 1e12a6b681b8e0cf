"""Registry replication models.

Defines the decoded event variants and the response returned for a
replicated event.
"""

__all__ = [
    "ImagePushed",
    "ImageDeleted",
    "UnrecognizedEvent",
    "ReplicationEvent",
    "ReplicationEventType",
    "ReplicationAction",
    "ReplicationResult",
]

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from aibs_informatics_core.models.base import EnumField, SchemaModel, StringField, custom_field


class ReplicationEventType(str, Enum):
    """Container registry event types that trigger replication."""

    IMAGE_PUSHED = "Microsoft.ContainerRegistry.ImagePushed"
    IMAGE_DELETED = "Microsoft.ContainerRegistry.ImageDeleted"

    @classmethod
    def from_event_type(cls, event_type: str) -> Optional["ReplicationEventType"]:
        """Match a raw event type, qualified or not (e.g. `ImagePushed`)."""
        for member in cls:
            if event_type in (member.value, member.value.rsplit(".", 1)[-1]):
                return member
        return None


@dataclass(frozen=True)
class ImagePushed:
    """An image tag was pushed to the source registry.

    Attributes:
        repository: Repository of the pushed image.
        tag: Tag that was pushed.
        source_host: Login server of the source registry.
        event_id: Id of the delivered event, if any.
    """

    repository: str
    tag: str
    source_host: str
    event_id: Optional[str] = None

    @property
    def image_reference(self) -> str:
        return f"{self.repository}:{self.tag}"


@dataclass(frozen=True)
class ImageDeleted:
    """A manifest was deleted from the source registry.

    Deletes are addressed by digest. A tag may have been moved to another
    manifest between the push and the delete.

    Attributes:
        repository: Repository of the deleted manifest.
        digest: Digest of the deleted manifest.
        source_host: Login server of the source registry.
        event_id: Id of the delivered event, if any.
    """

    repository: str
    digest: str
    source_host: str
    event_id: Optional[str] = None

    @property
    def image_reference(self) -> str:
        return f"{self.repository}@{self.digest}"


@dataclass(frozen=True)
class UnrecognizedEvent:
    """A well-formed event of a type that is not replicated."""

    event_type: str
    event_id: Optional[str] = None


ReplicationEvent = Union[ImagePushed, ImageDeleted, UnrecognizedEvent]


class ReplicationAction(str, Enum):
    IMPORT = "import"
    DELETE = "delete"


@dataclass
class ReplicationResult(SchemaModel):
    """Outcome of replaying one event against the target registry.

    Attributes:
        action: Whether the image was imported or deleted.
        repository: Repository of the image.
        reference: Tag for imports, digest for deletes.
        source_registry: Login server of the source registry.
        target_registry: Resource id of the target registry.
    """

    action: ReplicationAction = custom_field(mm_field=EnumField(ReplicationAction))
    repository: str = custom_field(mm_field=StringField())
    reference: str = custom_field(mm_field=StringField())
    source_registry: str = custom_field(mm_field=StringField())
    target_registry: str = custom_field(mm_field=StringField())
