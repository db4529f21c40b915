"""In-memory worklist cache."""
