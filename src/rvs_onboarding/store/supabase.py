"""
Supabase store backend.

Talks to the hosted PostgREST API at {url}/rest/v1/{table}.
"""

from typing import Any, Dict, Optional

import requests

from rvs_onboarding.logging_config import get_logger
from rvs_onboarding.models import PROFILE_FIELDS
from rvs_onboarding.store.base import (
    CONFIG_TABLE,
    PROFILES_TABLE,
    USERS_TABLE,
    OnboardingStore,
    StoreResult,
    utc_now,
)

logger = get_logger(__name__)

USER_COLUMNS = "id,email,current_step"
LISTING_SELECT = (
    f"id,email,current_step,created_at,"
    f"{PROFILES_TABLE}({','.join(PROFILE_FIELDS)})"
)


class SupabaseStore(OnboardingStore):
    """Onboarding store backed by a Supabase project."""

    def __init__(self, url: str, key: str, timeout: float = 10.0):
        """Initialize the store.

        Args:
            url: Project URL (e.g. https://xyz.supabase.co)
            key: Anon or service key sent as apikey and bearer token
            timeout: Request timeout in seconds
        """
        self.url = url.rstrip("/")
        self.key = key
        self.timeout = timeout
        self._session: Optional[requests.Session] = None

    def _get_client(self) -> requests.Session:
        """Get or create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                "apikey": self.key,
                "Authorization": f"Bearer {self.key}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            })
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def _endpoint(self, table: str) -> str:
        return f"{self.url}/rest/v1/{table}"

    def _request(
        self,
        method: str,
        table: str,
        operation: str,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> StoreResult:
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = self._get_client().request(
                method,
                self._endpoint(table),
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            return StoreResult.failure(f"Request failed: {e}", operation, table)

        if response.status_code >= 400:
            return StoreResult.failure(_error_message(response), operation, table)

        if response.status_code == 204 or not response.content:
            return StoreResult.success(None, operation, table)
        try:
            return StoreResult.success(response.json(), operation, table)
        except ValueError:
            return StoreResult.failure("Invalid JSON in response", operation, table)

    def _single(self, table: str, operation: str, params: Dict[str, str]) -> StoreResult:
        """Fetch at most one row; an empty result is a miss."""
        result = self._request("GET", table, operation, params=params)
        if not result.ok:
            return result
        rows = result.data or []
        return StoreResult.success(rows[0] if rows else None, operation, table)

    def _patch(
        self, table: str, operation: str, params: Dict[str, str], payload: Dict[str, Any]
    ) -> StoreResult:
        """Update rows; matching no row is a failure."""
        result = self._request(
            "PATCH", table, operation,
            params=params,
            json=payload,
            prefer="return=representation",
        )
        if result.ok and not result.data:
            return StoreResult.failure(f"No {table} row matched", operation, table)
        return result

    def load_config(self) -> StoreResult:
        result = self._request(
            "GET", CONFIG_TABLE, "load_config",
            params={"select": "component_name,page_number"}
        )
        if result.ok and result.data is None:
            result.data = []
        return result

    def save_config(self, component_name: str, page_number: int) -> StoreResult:
        return self._request(
            "POST", CONFIG_TABLE, "save_config",
            params={"on_conflict": "component_name"},
            json={
                "component_name": component_name,
                "page_number": page_number,
                "updated_at": utc_now(),
            },
            prefer="resolution=merge-duplicates,return=minimal",
        )

    def get_user_by_id(self, user_id: int) -> StoreResult:
        return self._single(
            USERS_TABLE, "get_user_by_id",
            {"select": USER_COLUMNS, "id": f"eq.{user_id}"}
        )

    def get_user_by_email(self, email: str) -> StoreResult:
        return self._single(
            USERS_TABLE, "get_user_by_email",
            {"select": USER_COLUMNS, "email": f"eq.{email}"}
        )

    def create_user(self, email: str, password: str, current_step: int) -> StoreResult:
        result = self._request(
            "POST", USERS_TABLE, "create_user",
            params={"select": USER_COLUMNS},
            json={"email": email, "password_hash": password, "current_step": current_step},
            prefer="return=representation",
        )
        if not result.ok:
            return result
        rows = result.data or []
        if not rows:
            return StoreResult.failure("Insert returned no row", "create_user", USERS_TABLE)
        return StoreResult.success(rows[0], "create_user", USERS_TABLE)

    def create_profile(self, user_id: int) -> StoreResult:
        return self._request(
            "POST", PROFILES_TABLE, "create_profile",
            json={"user_id": user_id},
            prefer="return=minimal",
        )

    def get_profile(self, user_id: int) -> StoreResult:
        return self._single(
            PROFILES_TABLE, "get_profile",
            {"select": "*", "user_id": f"eq.{user_id}"}
        )

    def update_profile(self, user_id: int, fields: Dict[str, Optional[str]]) -> StoreResult:
        payload = {name: fields[name] for name in PROFILE_FIELDS if name in fields}
        payload["updated_at"] = utc_now()
        return self._patch(PROFILES_TABLE, "update_profile", {"user_id": f"eq.{user_id}"}, payload)

    def update_step(self, user_id: int, current_step: int) -> StoreResult:
        return self._patch(
            USERS_TABLE, "update_step",
            {"id": f"eq.{user_id}"},
            {"current_step": current_step, "updated_at": utc_now()},
        )

    def list_users(self) -> StoreResult:
        result = self._request(
            "GET", USERS_TABLE, "list_users",
            params={"select": LISTING_SELECT, "order": "created_at.desc"}
        )
        if result.ok and result.data is None:
            result.data = []
        return result


def _error_message(response: requests.Response) -> str:
    """Pull PostgREST's error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text[:200]}"
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or str(body)
        return f"HTTP {response.status_code}: {message}"
    return f"HTTP {response.status_code}: {body}"
