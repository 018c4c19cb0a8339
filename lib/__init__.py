# =============================================================================
# lib/ - Standalone Adapter and Utility Modules
# =============================================================================
# This package contains reusable building blocks:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - redis_client.py: Cache adapter (counters, refresh tokens, categories)
# - embeddings.py: OpenAI embedding adapter
# - security.py: bcrypt password hashing and JWT helpers
# - utils.py: Shared utilities (UUID normalization, money, time)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.embeddings import EmbeddingClient
from lib.redis_client import RedisStore
from lib.supabase_client import SupabaseStore
from lib.utils import normalize_uuid, to_money, utcnow_iso

__all__ = [
    # Adapters
    "SupabaseStore",
    "RedisStore",
    "EmbeddingClient",
    # Utils
    "normalize_uuid",
    "to_money",
    "utcnow_iso",
]
