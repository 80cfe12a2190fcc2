"""Plugin system — pluggy hook specs, discovery, and the WAL event bus."""
