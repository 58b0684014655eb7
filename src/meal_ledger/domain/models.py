"""Domain models for callers of the meal ledger."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity resolved from a bearer token."""

    id: UUID
    email: str | None = None
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class Profile:
    """Display information for a user."""

    user_id: UUID
    display_name: str
