"""Event handler implementations.

Contains the handlers invoked by the hosting runtime:
- Registry replication (image push/delete events)
"""
