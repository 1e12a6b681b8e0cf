"""Commands replaying registry events against the target registry."""

from acr_replicator.handlers.replication.commands.base import ReplicationCommand
from acr_replicator.handlers.replication.commands.delete_image import DeleteImageCommand
from acr_replicator.handlers.replication.commands.import_image import ImportImageCommand

__all__ = ["ReplicationCommand", "ImportImageCommand", "DeleteImageCommand"]
