"""Target registry access.

Resource id parsing, service principal credentials and SDK client
construction for the target Azure Container Registry.
"""
