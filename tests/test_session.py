"""Tests for the remembered identifier and session resume."""

from unittest.mock import MagicMock

import pytest


class TestRememberedIdentifier:

    def test_absent(self, remembered):
        assert remembered.get() is None

    def test_remember_and_clear(self, remembered):
        remembered.remember(7)
        assert remembered.get() == 7
        remembered.clear()
        assert remembered.get() is None
        remembered.clear()

    def test_corrupt_file_ignored(self, remembered):
        remembered.path.write_text("not json")
        assert remembered.get() is None


class TestResume:
    """Test rebuilding wizard state from stored progress."""

    def _user(self, store, step, **profile):
        user_id = store.create_user("a@b.com", "x", step).data["id"]
        store.create_profile(user_id)
        if profile:
            store.update_profile(user_id, profile)
        return user_id

    def _resume(self, store, remembered):
        from rvs_onboarding.session import SessionResumeService
        from rvs_onboarding.state import WizardState

        return SessionResumeService(store, remembered).resume(WizardState())

    def test_no_identifier_starts_fresh(self, store, remembered):
        state = self._resume(store, remembered)
        assert state.step == 1
        assert state.done is False
        assert state.user_id is None

    def test_resume_step_three_with_profile(self, store, remembered):
        user_id = self._user(store, 3, about_me="hi", city="Austin")
        remembered.remember(user_id)

        state = self._resume(store, remembered)
        assert state.step == 3
        assert state.user_id == user_id
        assert state.email == "a@b.com"
        assert state.fields["about_me"] == "hi"
        assert state.fields["city"] == "Austin"
        assert state.fields["birthdate"] == ""

    def test_resume_done_skips_profile(self, store, remembered):
        user_id = self._user(store, 4, about_me="hi")
        remembered.remember(user_id)

        state = self._resume(store, remembered)
        assert state.done is True
        assert state.fields["about_me"] == ""

    def test_resume_low_step_lands_on_two(self, store, remembered):
        user_id = self._user(store, 1)
        remembered.remember(user_id)

        assert self._resume(store, remembered).step == 2

    def test_stale_identifier_cleared(self, store, remembered):
        remembered.remember(999)

        state = self._resume(store, remembered)
        assert state.step == 1
        assert state.error == ""
        assert remembered.get() is None

    def test_missing_profile_created(self, store, remembered):
        user_id = store.create_user("a@b.com", "x", 2).data["id"]
        remembered.remember(user_id)

        state = self._resume(store, remembered)
        assert state.step == 2
        assert all(value == "" for value in state.fields.values())
        assert state.profile_loaded is True
        assert store.get_profile(user_id).data is not None

    def test_profile_read_failure_is_visible(self, remembered):
        from rvs_onboarding.session import PROFILE_NOT_LOADED, SessionResumeService
        from rvs_onboarding.state import WizardState
        from rvs_onboarding.store.base import StoreResult

        fake = MagicMock()
        fake.get_user_by_id.return_value = StoreResult.success({"id": 5, "email": "a@b.com", "current_step": 3})
        fake.get_profile.return_value = StoreResult.failure("down", "get_profile", "rvs_user_profiles")
        remembered.remember(5)

        state = SessionResumeService(fake, remembered).resume(WizardState())
        assert state.step == 3
        assert state.profile_loaded is False
        assert state.error == PROFILE_NOT_LOADED
        fake.create_profile.assert_not_called()

    def test_lookup_failure_keeps_identifier(self, remembered):
        from rvs_onboarding.session import SessionResumeService
        from rvs_onboarding.state import WizardState
        from rvs_onboarding.store.base import StoreResult

        fake = MagicMock()
        fake.get_user_by_id.return_value = StoreResult.failure("down", "get_user_by_id", "rvs_users")
        remembered.remember(5)

        state = SessionResumeService(fake, remembered).resume(WizardState())
        assert state.step == 1
        assert state.error
        assert remembered.get() == 5


class TestIdentify:
    """Test step 1 account identification."""

    def _service(self, store, remembered):
        from rvs_onboarding.session import SessionResumeService
        return SessionResumeService(store, remembered)

    def test_new_account(self, store, remembered):
        from rvs_onboarding.state import WizardState

        state = WizardState()
        self._service(store, remembered).identify(state, "a@b.com", "x")

        assert state.step == 2
        user = store.get_user_by_email("a@b.com").data
        assert user["current_step"] == 2
        assert state.user_id == user["id"]
        assert remembered.get() == user["id"]
        assert store.get_profile(user["id"]).data is not None

    def test_existing_account_ignores_password(self, store, remembered):
        from rvs_onboarding.state import WizardState

        user_id = store.create_user("a@b.com", "original", 3).data["id"]
        state = WizardState()
        self._service(store, remembered).identify(state, "a@b.com", "different")

        assert state.user_id == user_id
        assert state.step == 3
        assert remembered.get() == user_id
        assert len(store.list_users().data) == 1

    def test_existing_account_loads_profile(self, store, remembered):
        from rvs_onboarding.state import WizardState

        user_id = store.create_user("a@b.com", "x", 2).data["id"]
        store.create_profile(user_id)
        store.update_profile(user_id, {"about_me": "hi"})

        state = WizardState()
        self._service(store, remembered).identify(state, "a@b.com", "x")
        assert state.fields["about_me"] == "hi"

    def test_existing_account_without_profile_gets_one(self, store, remembered):
        from rvs_onboarding.state import WizardState

        user_id = store.create_user("a@b.com", "x", 2).data["id"]
        self._service(store, remembered).identify(WizardState(), "a@b.com", "x")
        assert store.get_profile(user_id).data is not None

    def test_existing_done_account(self, store, remembered):
        from rvs_onboarding.state import WizardState

        store.create_user("a@b.com", "x", 4)
        state = WizardState()
        self._service(store, remembered).identify(state, "a@b.com", "x")
        assert state.done is True

    def test_empty_input_makes_no_store_call(self, remembered):
        from rvs_onboarding.exceptions import ValidationError
        from rvs_onboarding.state import WizardState

        fake = MagicMock()
        with pytest.raises(ValidationError) as exc_info:
            self._service(fake, remembered).identify(WizardState(), "", "x")
        assert exc_info.value.field == "email"
        assert fake.mock_calls == []

    def test_create_failure_surfaces_store_message(self, remembered):
        from rvs_onboarding.exceptions import StoreError
        from rvs_onboarding.state import WizardState
        from rvs_onboarding.store.base import StoreResult

        fake = MagicMock()
        fake.get_user_by_email.return_value = StoreResult.success(None)
        fake.create_user.return_value = StoreResult.failure(
            "duplicate key value violates unique constraint", "create_user", "rvs_users"
        )
        with pytest.raises(StoreError) as exc_info:
            self._service(fake, remembered).identify(WizardState(), "a@b.com", "x")

        assert "duplicate key" in exc_info.value.message
        assert remembered.get() is None
        fake.create_profile.assert_not_called()
