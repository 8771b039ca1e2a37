from watchpick.application.ports.identity_provider_port import IdentityProviderPort
from watchpick.application.ports.key_value_store_port import KeyValueStorePort
from watchpick.application.ports.movie_search_port import MovieSearchPort

__all__ = ["IdentityProviderPort", "KeyValueStorePort", "MovieSearchPort"]
