"""Infrastructure adapters: database engine and repository implementations."""
