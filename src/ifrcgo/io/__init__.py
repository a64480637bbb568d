"""I/O layer: response caching."""
