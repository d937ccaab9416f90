"""Infrastructure adapters: database, cache and retry."""
