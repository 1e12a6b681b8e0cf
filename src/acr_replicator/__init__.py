"""ACR Replicator.

Mirrors container images between two Azure Container Registries by reacting
to registry lifecycle events: pushed images are imported into the target
registry and deleted manifests are removed from it.
"""
