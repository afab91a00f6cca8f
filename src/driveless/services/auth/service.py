"""Admin authorization against the shared admin passphrase."""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from ...config import Settings, settings as default_settings
from ...models.domain import AdminState
from ...persistence.base import PersistentRecordStore, StoreWriteError
from .identity import IdentityProvider

logger = logging.getLogger(__name__)


class AuthFailureReason(str, Enum):
    INVALID_CREDENTIAL = "invalid_credential"
    IDENTITY_REQUIRED = "identity_required"
    STORE_WRITE_FAILURE = "store_write_failure"


@dataclass(slots=True, frozen=True)
class AuthResult:
    success: bool
    reason: Optional[AuthFailureReason] = None
    identity: Optional[str] = None

    @classmethod
    def ok(cls, identity: Optional[str]) -> "AuthResult":
        return cls(success=True, identity=identity)

    @classmethod
    def failure(cls, reason: AuthFailureReason) -> "AuthResult":
        return cls(success=False, reason=reason)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def load_admin_state(store: PersistentRecordStore, config: Settings | None = None) -> AdminState:
    """Read the persisted admin allow-list, flag and last login time."""
    config = config or default_settings
    return AdminState(
        admin_users=store.get_string_set(config.admin_users_key),
        admin_mode=store.get_flag(config.admin_mode_key),
        last_login_at=store.get_timestamp(config.admin_login_time_key),
    )


def refresh_admin_state(state: AdminState, store: PersistentRecordStore, config: Settings | None = None) -> AdminState:
    """Reload ``state`` in place so grants written by other processes become visible."""
    current = load_admin_state(store, config)
    state.admin_users = current.admin_users
    state.admin_mode = current.admin_mode
    state.last_login_at = current.last_login_at
    return state


class AdminAuthorizationService:
    """Turns one successful passphrase check into a durable per-identity admin grant.

    ``state`` is shared by reference with whoever built the service; it is only
    updated after every store write of a grant has succeeded. There is no revoke
    operation: clearing an admin requires editing the store directly.
    """

    def __init__(
        self,
        store: PersistentRecordStore,
        identity_provider: IdentityProvider,
        state: AdminState | None = None,
        config: Settings | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.identity_provider = identity_provider
        self.config = config or default_settings
        self.state = state if state is not None else load_admin_state(store, self.config)
        self._clock = clock

    def _credential_matches(self, submitted_credential: str) -> bool:
        expected = self.config.admin_passphrase
        if not expected or not submitted_credential:
            return False
        return hmac.compare_digest(submitted_credential.encode("utf-8"), expected.encode("utf-8"))

    def authenticate(self, submitted_credential: str) -> AuthResult:
        if not self._credential_matches(submitted_credential):
            logger.info("Admin authentication failed")
            return AuthResult.failure(AuthFailureReason.INVALID_CREDENTIAL)

        identity = self.identity_provider.current_identity()
        if identity is None and not self.config.allow_anonymous_admin:
            logger.info("Admin authentication rejected: no signed-in user")
            return AuthResult.failure(AuthFailureReason.IDENTITY_REQUIRED)

        now = self._clock()
        users_key = self.config.admin_users_key
        mode_key = self.config.admin_mode_key
        previous_users = self.store.get_string_set(users_key)
        previous_mode = self.store.get_flag(mode_key)
        admin_users = set(self.state.admin_users)
        wrote_users = wrote_mode = False
        try:
            if identity is not None:
                admin_users |= previous_users
                if identity not in admin_users:
                    admin_users.add(identity)
                    self.store.set_string_set(users_key, admin_users)
                    wrote_users = True
                    logger.info("User %s added to admin list", identity)
            else:
                logger.warning("No signed-in user, granting admin mode without an identity")
            self.store.set_flag(mode_key, True)
            wrote_mode = True
            self.store.set_timestamp(self.config.admin_login_time_key, now)
        except StoreWriteError as exc:
            logger.warning(f"Failed to persist admin grant: {exc}")
            self._rollback(
                previous_users if wrote_users else None,
                previous_mode if wrote_mode else None,
            )
            return AuthResult.failure(AuthFailureReason.STORE_WRITE_FAILURE)

        self.state.admin_users = admin_users
        self.state.admin_mode = True
        self.state.last_login_at = now
        logger.info("Admin authentication successful")
        return AuthResult.ok(identity)

    def _rollback(self, previous_users: Optional[set[str]], previous_mode: Optional[bool]) -> None:
        """Undo the parts of a grant that reached the store before a later write failed."""
        try:
            if previous_users is not None:
                self.store.set_string_set(self.config.admin_users_key, previous_users)
            if previous_mode is not None:
                self.store.set_flag(self.config.admin_mode_key, previous_mode)
        except StoreWriteError as exc:
            logger.error(f"Could not roll back partial admin grant, store may hold a grant: {exc}")

    def is_admin(self, identity: Optional[str] = None) -> bool:
        if identity is None:
            identity = self.identity_provider.current_identity()
        return self.state.grants(identity)
