"""
RVS Onboarding Exceptions

Error types raised by the onboarding core, each with an optional remediation hint.
"""

from typing import List, Optional


class OnboardingError(Exception):
    """Base exception for all onboarding errors."""

    def __init__(
        self,
        message: str,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message
            remediation: Suggested fix for the user
            details: Technical details for debugging
        """
        super().__init__(message)
        self.message = message
        self.remediation = remediation
        self.details = details

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.remediation:
            parts.append(f"To fix: {self.remediation}")
        return "\n".join(parts)


class ValidationError(OnboardingError):
    """Required user input is missing."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.field = field
        super().__init__(message, remediation, details)


class StoreError(OnboardingError):
    """A read or write against the backing store failed."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.operation = operation
        self.table = table
        if not remediation:
            remediation = "Check the store connection and repeat the last action"
        super().__init__(message, remediation, details)


class ProgressWriteError(StoreError):
    """Saving a step left the profile and the recorded step out of sync."""

    def __init__(
        self,
        message: str,
        profile_saved: bool = False,
        step_saved: bool = False,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.profile_saved = profile_saved
        self.step_saved = step_saved
        super().__init__(
            message,
            operation="commit_step",
            remediation=remediation,
            details=details
        )


class ConfigCommitError(StoreError):
    """Some component assignments were written and some were not."""

    def __init__(
        self,
        message: str,
        written: Optional[List[str]] = None,
        failed: Optional[List[str]] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.written = written or []
        self.failed = failed or []
        if not remediation and self.failed:
            remediation = (
                f"Save the configuration again; not written: {', '.join(self.failed)}"
            )
        super().__init__(
            message,
            operation="save_config",
            table="rvs_onboarding_config",
            remediation=remediation,
            details=details
        )


class BusyError(OnboardingError):
    """An action was issued while another one is still in flight."""

    def __init__(
        self,
        message: str = "Another action is still in progress",
        action: Optional[str] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.action = action
        super().__init__(message, remediation, details)


class TransitionError(OnboardingError):
    """The requested action is not available at the current step."""

    def __init__(
        self,
        message: str,
        action: Optional[str] = None,
        step: Optional[object] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.action = action
        self.step = step
        super().__init__(message, remediation, details)


class SettingsError(OnboardingError):
    """Missing or invalid application settings."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.key = key
        if not remediation and key:
            remediation = f"Set '{key}' in config.yaml, .env or the environment"
        super().__init__(message, remediation, details)


# Error code mapping for CLI exit codes
ERROR_CODES = {
    ValidationError: 10,
    ProgressWriteError: 12,
    ConfigCommitError: 13,
    StoreError: 11,
    BusyError: 14,
    TransitionError: 16,
    SettingsError: 15,
    OnboardingError: 1,
}


def get_error_code(error: Exception) -> int:
    """Get the exit code for an error type."""
    for error_type, code in ERROR_CODES.items():
        if isinstance(error, error_type):
            return code
    return 1
