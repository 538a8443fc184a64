"""Supabase Auth identity provider."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_money.services.identity import IdentityProvider

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Resolve access tokens with Supabase Auth."""

    client: Client

    def resolve_user(self, access_token: str) -> UUID | None:
        """Return the user id behind an access token, or None when rejected."""
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as exc:
            _logger.warning("Supabase rejected access token: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))
