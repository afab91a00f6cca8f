"""Identity providers that resolve the currently signed-in user."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from supabase import Client

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    def current_identity(self) -> Optional[str]: ...


class StaticIdentityProvider:
    """Identity already established by the caller, e.g. from a trusted request header."""

    def __init__(self, identity: Optional[str] = None) -> None:
        self.identity = identity.strip() if identity and identity.strip() else None

    def current_identity(self) -> Optional[str]:
        return self.identity


class SupabaseIdentityProvider:
    """Resolves the user id behind a Supabase Auth access token."""

    def __init__(self, client: Client | None, access_token: Optional[str]) -> None:
        self.client = client
        self.access_token = access_token
        self._resolved = False
        self._identity: Optional[str] = None

    def current_identity(self) -> Optional[str]:
        if self._resolved:
            return self._identity
        self._resolved = True
        if self.client is None or not self.access_token:
            return None
        try:
            response = self.client.auth.get_user(self.access_token)
        except Exception as e:
            logger.warning(f"Supabase token verification failed: {e}")
            return None
        user = getattr(response, "user", None)
        self._identity = str(user.id) if user is not None and getattr(user, "id", None) else None
        return self._identity
