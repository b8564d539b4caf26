"""Object storage configuration, naming and the OCI adapter."""
