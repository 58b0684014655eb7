"""Profile lookups for authenticated users."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_ledger.domain.models import AuthenticatedUser, Profile

FALLBACK_DISPLAY_NAME = "esteemed guest"


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_display_name(self, user_id: UUID) -> str | None:
        """Return the stored display name, if any."""


@dataclass
class ProfileService:
    """Application service for profile data."""

    repository: ProfileRepository

    def get_profile(self, user: AuthenticatedUser) -> Profile:
        """Return the user's profile with a resolved display name."""
        stored = self.repository.get_display_name(user.id)
        if stored and stored.strip():
            return Profile(user_id=user.id, display_name=stored.strip())
        metadata_name = user.metadata.get("display_name")
        if isinstance(metadata_name, str) and metadata_name.strip():
            return Profile(user_id=user.id, display_name=metadata_name.strip())
        if user.email and user.email.split("@")[0]:
            return Profile(user_id=user.id, display_name=user.email.split("@")[0])
        return Profile(user_id=user.id, display_name=FALLBACK_DISPLAY_NAME)
