"""
RVS Onboarding Data Model

Schemas for component assignments, users, profiles and the data listing.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Page numbers a component can be assigned to
PAGE_NUMBERS = (2, 3)

# Page used for components without a configuration row
DEFAULT_PAGE = 2

# current_step value meaning onboarding is complete
DONE_STEP = 4


class ComponentName(str, Enum):
    """Optional form components that can be moved between pages."""

    ABOUT_ME = "about_me"
    ADDRESS = "address"
    BIRTHDATE = "birthdate"


# Canonical render order
COMPONENTS: List[ComponentName] = [
    ComponentName.ABOUT_ME,
    ComponentName.ADDRESS,
    ComponentName.BIRTHDATE,
]

COMPONENT_LABELS: Dict[ComponentName, str] = {
    ComponentName.ABOUT_ME: "About Me",
    ComponentName.ADDRESS: "Address",
    ComponentName.BIRTHDATE: "Birthdate",
}

# Profile columns each component edits
COMPONENT_FIELDS: Dict[ComponentName, List[str]] = {
    ComponentName.ABOUT_ME: ["about_me"],
    ComponentName.ADDRESS: ["street_address", "city", "state", "zip"],
    ComponentName.BIRTHDATE: ["birthdate"],
}

PROFILE_FIELDS: List[str] = [
    "about_me", "street_address", "city", "state", "zip", "birthdate",
]


class ComponentAssignment(BaseModel):
    """Assignment of one component to wizard page 2 or 3."""

    model_config = ConfigDict(frozen=True)

    component_name: ComponentName
    page_number: int = Field(default=DEFAULT_PAGE, description="Wizard page (2 or 3)")

    @field_validator("page_number")
    @classmethod
    def check_page(cls, value: int) -> int:
        if value not in PAGE_NUMBERS:
            raise ValueError(f"page_number must be one of {PAGE_NUMBERS}, got {value}")
        return value

    def on_page(self, page: int) -> "ComponentAssignment":
        return self.model_copy(update={"page_number": page})


class OnboardingUser(BaseModel):
    """A user going through onboarding; current_step is the resume point."""

    id: int
    email: str
    password_hash: Optional[str] = None
    current_step: int = 1
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.current_step >= DONE_STEP


class UserProfile(BaseModel):
    """Optional profile details, one per user."""

    user_id: int
    about_me: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    birthdate: Optional[str] = None
    updated_at: Optional[str] = None

    def field_values(self) -> Dict[str, str]:
        """Profile values as editable strings (None becomes empty)."""
        return {name: getattr(self, name) or "" for name in PROFILE_FIELDS}


def profile_update_payload(fields: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """Build the profile write payload, storing empty values as null."""
    return {name: (fields.get(name) or None) for name in PROFILE_FIELDS}


def empty_fields() -> Dict[str, str]:
    return {name: "" for name in PROFILE_FIELDS}


class UserListingRow(BaseModel):
    """One row of the read-only user data listing."""

    id: int
    email: str
    current_step: int
    created_at: Optional[str] = None
    about_me: Optional[str] = None
    address: str = ""
    birthdate: Optional[str] = None

    @property
    def status(self) -> str:
        if self.current_step > 3:
            return "Done"
        return f"{self.current_step}/3"

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["status"] = self.status
        return data
