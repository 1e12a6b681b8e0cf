"""Registry replication handlers.

Decodes container registry lifecycle events and replays them against
the target registry.
"""
