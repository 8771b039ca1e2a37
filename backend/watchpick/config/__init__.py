"""Service-side configuration."""
