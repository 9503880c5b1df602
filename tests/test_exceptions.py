"""Tests for onboarding exceptions."""

import pytest


class TestOnboardingExceptions:
    """Test custom exception types."""

    def test_base_error_message(self):
        """Test base OnboardingError with message only."""
        from rvs_onboarding.exceptions import OnboardingError

        error = OnboardingError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.remediation is None
        assert error.details is None
        assert str(error) == "Something went wrong"

    def test_base_error_with_details_and_remediation(self):
        """Test OnboardingError renders details and remediation lines."""
        from rvs_onboarding.exceptions import OnboardingError

        error = OnboardingError(
            "Something went wrong",
            remediation="Try again later",
            details="HTTP 503"
        )
        assert "Details: HTTP 503" in str(error)
        assert "To fix: Try again later" in str(error)

    def test_validation_error_field(self):
        """Test ValidationError keeps the offending field."""
        from rvs_onboarding.exceptions import ValidationError

        error = ValidationError("Email and password are required.", field="email")
        assert error.field == "email"
        assert error.remediation is None

    def test_store_error_default_remediation(self):
        """Test StoreError suggests retrying."""
        from rvs_onboarding.exceptions import StoreError

        error = StoreError("Could not update step", operation="update_step", table="rvs_users")
        assert error.operation == "update_step"
        assert error.table == "rvs_users"
        assert "repeat the last action" in str(error)

    def test_progress_write_error_flags(self):
        """Test ProgressWriteError says which write reached the store."""
        from rvs_onboarding.exceptions import ProgressWriteError, StoreError

        error = ProgressWriteError("Partial save", profile_saved=True, step_saved=False)
        assert isinstance(error, StoreError)
        assert error.profile_saved is True
        assert error.step_saved is False
        assert error.operation == "commit_step"

    def test_config_commit_error_lists_failed(self):
        """Test ConfigCommitError names the components not written."""
        from rvs_onboarding.exceptions import ConfigCommitError

        error = ConfigCommitError("Partial", written=["about_me"], failed=["address", "birthdate"])
        assert error.written == ["about_me"]
        assert error.failed == ["address", "birthdate"]
        assert "address, birthdate" in str(error)
        assert error.table == "rvs_onboarding_config"

    def test_settings_error_key(self):
        """Test SettingsError points at the setting."""
        from rvs_onboarding.exceptions import SettingsError

        error = SettingsError("Missing URL", key="SUPABASE_URL")
        assert "SUPABASE_URL" in str(error)


class TestErrorCodes:
    """Test error code mapping."""

    @pytest.mark.parametrize("name,code", [
        ("ValidationError", 10),
        ("StoreError", 11),
        ("ProgressWriteError", 12),
        ("ConfigCommitError", 13),
        ("BusyError", 14),
        ("SettingsError", 15),
        ("TransitionError", 16),
    ])
    def test_known_types(self, name, code):
        """Test each error class maps to its exit code."""
        from rvs_onboarding import exceptions

        error_type = getattr(exceptions, name)
        assert exceptions.get_error_code(error_type("x")) == code

    def test_unknown_type(self):
        """Test unrelated exceptions map to 1."""
        from rvs_onboarding.exceptions import get_error_code

        assert get_error_code(RuntimeError("boom")) == 1
