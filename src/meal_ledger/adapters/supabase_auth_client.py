"""Supabase Auth client for bearer token verification."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from meal_ledger.domain.models import AuthenticatedUser
from meal_ledger.services.auth import AuthClient

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthClient(AuthClient):
    """Resolves access tokens through Supabase Auth."""

    client: Client

    def get_user(self, access_token: str) -> AuthenticatedUser | None:
        """Return the user for a token, or None when Supabase rejects it."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            _logger.info("Supabase rejected access token: %s", exc)
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        metadata = getattr(user, "user_metadata", None)
        return AuthenticatedUser(
            id=UUID(str(user.id)),
            email=getattr(user, "email", None),
            metadata=dict(metadata) if isinstance(metadata, dict) else {},
        )
