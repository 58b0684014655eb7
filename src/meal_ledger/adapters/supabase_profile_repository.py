"""Supabase-backed profile repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_ledger.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the profiles table."""

    client: Client

    def get_display_name(self, user_id: UUID) -> str | None:
        """Return the stored display name for a user, if present."""
        response = (
            self.client.table("profiles")
            .select("display_name")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("display_name")
        return value if isinstance(value, str) else None
