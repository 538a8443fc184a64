"""Identity lookup for authenticated requests."""

from typing import Protocol
from uuid import UUID


class IdentityProvider(Protocol):
    """Resolves an access token to a stable user id."""

    def resolve_user(self, access_token: str) -> UUID | None:
        """Return the user id for a valid token, otherwise None."""
