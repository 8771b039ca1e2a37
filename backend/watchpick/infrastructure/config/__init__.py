"""Infrastructure configuration (env + paths)."""
