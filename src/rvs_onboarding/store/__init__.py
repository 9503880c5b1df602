"""
RVS Onboarding Stores

Backends for configuration, user and profile records.
"""

from rvs_onboarding.settings import Settings
from rvs_onboarding.store.base import OnboardingStore, StoreResult
from rvs_onboarding.store.sqlite import SQLiteStore
from rvs_onboarding.store.supabase import SupabaseStore


def create_store(settings: Settings) -> OnboardingStore:
    """Build the store backend selected in settings."""
    settings.validate()
    if settings.backend == "supabase":
        return SupabaseStore(
            settings.supabase_url,
            settings.supabase_key,
            timeout=settings.request_timeout
        )
    store = SQLiteStore(settings.database_path)
    store.initialize()
    return store


__all__ = [
    "OnboardingStore",
    "StoreResult",
    "SQLiteStore",
    "SupabaseStore",
    "create_store",
]
