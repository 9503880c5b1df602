"""
User data listing.

Read-only projection of every user joined to their profile, newest first.
"""

from typing import Any, Dict, List, Optional

from rvs_onboarding.models import UserListingRow
from rvs_onboarding.store.base import PROFILES_TABLE, OnboardingStore

ADDRESS_PARTS = ["street_address", "city", "state", "zip"]


def _embedded_profile(row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    profile = row.get(PROFILES_TABLE)
    if isinstance(profile, list):
        return profile[0] if profile else None
    return profile


def to_listing_row(row: Dict[str, Any]) -> UserListingRow:
    profile = _embedded_profile(row) or {}
    address = ", ".join(str(profile[part]) for part in ADDRESS_PARTS if profile.get(part))
    return UserListingRow(
        id=row["id"],
        email=row["email"],
        current_step=row["current_step"],
        created_at=row.get("created_at"),
        about_me=profile.get("about_me") or None,
        address=address,
        birthdate=profile.get("birthdate") or None,
    )


def list_onboarding_rows(store: OnboardingStore) -> List[UserListingRow]:
    """All users with their status, sorted by created_at descending.

    Raises:
        StoreError: If the listing cannot be read
    """
    rows = [to_listing_row(row) for row in store.list_users().unwrap() or []]
    rows.sort(key=lambda r: r.created_at or "", reverse=True)
    return rows
