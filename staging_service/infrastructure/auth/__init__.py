"""Identity Infrastructure"""

from .supabase_auth import SupabaseIdentityResolver

__all__ = ["SupabaseIdentityResolver"]
