"""Core infrastructure: configuration, logging, database, concurrency."""
