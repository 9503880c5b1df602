"""Tests for the progress persister."""

from unittest.mock import MagicMock

import pytest


class TestProgressPersister:

    @pytest.fixture
    def user_id(self, store):
        user_id = store.create_user("a@b.com", "x", 2).data["id"]
        store.create_profile(user_id)
        return user_id

    def test_commit_step_writes_profile_and_step(self, store, user_id):
        from rvs_onboarding.persister import ProgressPersister

        ProgressPersister(store).commit_step(user_id, {"about_me": "hi", "zip": ""}, 3)

        profile = store.get_profile(user_id).data
        assert profile["about_me"] == "hi"
        assert profile["zip"] is None
        assert store.get_user_by_id(user_id).data["current_step"] == 3

    def test_rewind_keeps_profile(self, store, user_id):
        from rvs_onboarding.persister import ProgressPersister

        persister = ProgressPersister(store)
        persister.commit_step(user_id, {"about_me": "hi"}, 3)
        persister.rewind(user_id, 2)

        assert store.get_user_by_id(user_id).data["current_step"] == 2
        assert store.get_profile(user_id).data["about_me"] == "hi"

    def test_profile_failure_skips_step_write(self):
        from rvs_onboarding.exceptions import ProgressWriteError
        from rvs_onboarding.persister import ProgressPersister
        from rvs_onboarding.store.base import StoreResult

        fake = MagicMock()
        fake.update_profile.return_value = StoreResult.failure("down", "update_profile", "rvs_user_profiles")

        with pytest.raises(ProgressWriteError) as exc_info:
            ProgressPersister(fake).commit_step(1, {}, 3)

        assert exc_info.value.profile_saved is False
        assert exc_info.value.step_saved is False
        fake.update_step.assert_not_called()

    def test_step_failure_after_profile_saved(self):
        """Test a failed step write is distinguishable from a failed profile write."""
        from rvs_onboarding.exceptions import ProgressWriteError
        from rvs_onboarding.persister import ProgressPersister
        from rvs_onboarding.store.base import StoreResult

        fake = MagicMock()
        fake.update_profile.return_value = StoreResult.success()
        fake.update_step.return_value = StoreResult.failure("down", "update_step", "rvs_users")

        with pytest.raises(ProgressWriteError) as exc_info:
            ProgressPersister(fake).commit_step(1, {"about_me": "hi"}, 3)

        assert exc_info.value.profile_saved is True
        assert exc_info.value.step_saved is False
        assert exc_info.value.details == "down"

    def test_rewind_failure(self):
        from rvs_onboarding.exceptions import StoreError
        from rvs_onboarding.persister import ProgressPersister
        from rvs_onboarding.store.base import StoreResult

        fake = MagicMock()
        fake.update_step.return_value = StoreResult.failure("down", "update_step", "rvs_users")

        with pytest.raises(StoreError):
            ProgressPersister(fake).rewind(1)
