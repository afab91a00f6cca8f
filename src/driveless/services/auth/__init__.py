"""Admin authorization helpers."""

from .identity import IdentityProvider, StaticIdentityProvider, SupabaseIdentityProvider
from .service import (
    AdminAuthorizationService,
    AuthFailureReason,
    AuthResult,
    load_admin_state,
    refresh_admin_state,
)

__all__ = [
    "AdminAuthorizationService",
    "AuthFailureReason",
    "AuthResult",
    "IdentityProvider",
    "StaticIdentityProvider",
    "SupabaseIdentityProvider",
    "load_admin_state",
    "refresh_admin_state",
]
