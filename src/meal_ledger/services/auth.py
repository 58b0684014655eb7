"""Caller authentication for API requests."""

import hmac
from dataclasses import dataclass
from typing import Protocol

from meal_ledger.domain.models import AuthenticatedUser


class AuthenticationError(Exception):
    """Raised when a request carries missing or invalid credentials."""


class AuthClient(Protocol):
    """Interface for resolving bearer tokens."""

    def get_user(self, access_token: str) -> AuthenticatedUser | None:
        """Return the user for a valid access token."""


@dataclass
class AuthService:
    """Checks the API key header and resolves the bearer token."""

    client: AuthClient
    api_key: str

    def authenticate(
        self, authorization: str | None, api_key: str | None
    ) -> AuthenticatedUser:
        """Return the caller or raise AuthenticationError."""
        if not api_key or not hmac.compare_digest(
            api_key.encode(), self.api_key.encode()
        ):
            raise AuthenticationError("Invalid API key")
        token = parse_bearer_token(authorization)
        if token is None:
            raise AuthenticationError("Missing bearer token")
        user = self.client.get_user(token)
        if user is None:
            raise AuthenticationError("Invalid bearer token")
        return user


def parse_bearer_token(header: str | None) -> str | None:
    """Extract the token from an `Authorization: Bearer` header."""
    if not header:
        return None
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
