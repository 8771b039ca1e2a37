from watchpick.infrastructure.providers.omdb_client import OmdbClient

__all__ = ["OmdbClient"]
