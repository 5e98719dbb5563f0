"""Domain layer: hashing, verification and archival of outline entries."""
