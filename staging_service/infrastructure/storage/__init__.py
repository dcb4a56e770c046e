"""Artifact Stores"""

from .local_store import LocalArtifactStore
from .supabase_store import SupabaseArtifactStore

__all__ = ["LocalArtifactStore", "SupabaseArtifactStore"]
