from watchpick.infrastructure.auth.supabase_identity import SupabaseIdentityProvider

__all__ = ["SupabaseIdentityProvider"]
