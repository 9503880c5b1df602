"""Tests for the Supabase store backend."""

from unittest.mock import MagicMock

import pytest
import requests


def _response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.content = b"" if body is None else b"x"
    response.json.return_value = body
    response.text = str(body)
    return response


class TestSupabaseStore:

    @pytest.fixture
    def client(self):
        from rvs_onboarding.store.supabase import SupabaseStore

        store = SupabaseStore("https://demo.supabase.co/", "anon-key", timeout=5)
        session = MagicMock()
        store._session = session
        return store, session

    def test_session_headers(self):
        from rvs_onboarding.store.supabase import SupabaseStore

        session = SupabaseStore("https://demo.supabase.co", "anon-key")._get_client()
        assert session.headers["apikey"] == "anon-key"
        assert session.headers["Authorization"] == "Bearer anon-key"

    def test_load_config(self, client):
        store, session = client
        session.request.return_value = _response(body=[{"component_name": "about_me", "page_number": 2}])

        result = store.load_config()
        assert result.ok
        assert result.data == [{"component_name": "about_me", "page_number": 2}]
        method, url = session.request.call_args.args
        assert method == "GET"
        assert url == "https://demo.supabase.co/rest/v1/rvs_onboarding_config"
        assert session.request.call_args.kwargs["timeout"] == 5

    def test_get_user_by_email_filter(self, client):
        store, session = client
        session.request.return_value = _response(body=[{"id": 3, "email": "a@b.com", "current_step": 2}])

        result = store.get_user_by_email("a@b.com")
        assert result.data["id"] == 3
        params = session.request.call_args.kwargs["params"]
        assert params["email"] == "eq.a@b.com"
        assert params["select"] == "id,email,current_step"

    def test_lookup_miss(self, client):
        store, session = client
        session.request.return_value = _response(body=[])

        result = store.get_user_by_id(9)
        assert result.ok is True
        assert result.data is None

    def test_create_user_returns_row(self, client):
        store, session = client
        session.request.return_value = _response(201, [{"id": 4, "email": "a@b.com", "current_step": 2}])

        result = store.create_user("a@b.com", "x", 2)
        assert result.data == {"id": 4, "email": "a@b.com", "current_step": 2}
        kwargs = session.request.call_args.kwargs
        assert kwargs["json"] == {"email": "a@b.com", "password_hash": "x", "current_step": 2}
        assert kwargs["headers"] == {"Prefer": "return=representation"}

    def test_http_error_message(self, client):
        store, session = client
        session.request.return_value = _response(409, {"message": "duplicate key value"})

        result = store.create_user("a@b.com", "x", 2)
        assert result.ok is False
        assert "duplicate key value" in result.error

    def test_network_error(self, client):
        store, session = client
        session.request.side_effect = requests.ConnectionError("refused")

        result = store.update_step(1, 3)
        assert result.ok is False
        assert "refused" in result.error
        assert result.operation == "update_step"

    def test_save_config_is_upsert(self, client):
        store, session = client
        session.request.return_value = _response(201)

        assert store.save_config("birthdate", 3).ok
        kwargs = session.request.call_args.kwargs
        assert session.request.call_args.args[0] == "POST"
        assert kwargs["params"] == {"on_conflict": "component_name"}
        assert kwargs["json"]["page_number"] == 3
        assert "updated_at" in kwargs["json"]
        assert "merge-duplicates" in kwargs["headers"]["Prefer"]

    def test_update_profile_payload(self, client):
        store, session = client
        session.request.return_value = _response(200, [{"user_id": 4}])

        assert store.update_profile(4, {"about_me": "hi", "city": None}).ok
        kwargs = session.request.call_args.kwargs
        assert kwargs["headers"]["Prefer"] == "return=representation"
        assert session.request.call_args.args[0] == "PATCH"
        assert kwargs["params"] == {"user_id": "eq.4"}
        assert kwargs["json"]["about_me"] == "hi"
        assert kwargs["json"]["city"] is None
        assert "updated_at" in kwargs["json"]

    def test_update_matching_no_row_fails(self, client):
        store, session = client
        session.request.return_value = _response(200, [])

        result = store.update_step(9, 3)
        assert result.ok is False
        assert result.operation == "update_step"
        assert session.request.call_args.kwargs["params"] == {"id": "eq.9"}

    def test_list_users_embeds_profiles(self, client):
        store, session = client
        session.request.return_value = _response(body=[])

        assert store.list_users().data == []
        params = session.request.call_args.kwargs["params"]
        assert params["order"] == "created_at.desc"
        assert "rvs_user_profiles(" in params["select"]
