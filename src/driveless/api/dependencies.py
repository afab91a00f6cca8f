"""Request-scoped service wiring."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from ..config import Settings
from ..db.supabase import get_supabase_client
from ..persistence.base import PersistentRecordStore
from ..services.auth import (
    AdminAuthorizationService,
    IdentityProvider,
    StaticIdentityProvider,
    SupabaseIdentityProvider,
    refresh_admin_state,
)
from ..services.history import RouteHistoryAggregator, RouteHistoryRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> PersistentRecordStore:
    return request.app.state.store


def get_identity_provider(
    request: Request,
    x_driveless_user: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
) -> IdentityProvider:
    config = get_settings(request)
    if config.identity_backend == "supabase":
        token = None
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization.split(" ", 1)[1].strip()
        return SupabaseIdentityProvider(get_supabase_client(), token)
    return StaticIdentityProvider(x_driveless_user)


def get_admin_service(
    request: Request,
    store: PersistentRecordStore = Depends(get_store),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> AdminAuthorizationService:
    config = get_settings(request)
    # other workers may have granted admins since startup
    state = refresh_admin_state(request.app.state.admin_state, store, config)
    return AdminAuthorizationService(
        store=store,
        identity_provider=identity_provider,
        state=state,
        config=config,
    )


def get_history_repository(
    request: Request,
    store: PersistentRecordStore = Depends(get_store),
) -> RouteHistoryRepository:
    return RouteHistoryRepository(store, config=get_settings(request))


def get_history_aggregator(
    request: Request,
    store: PersistentRecordStore = Depends(get_store),
) -> RouteHistoryAggregator:
    return RouteHistoryAggregator(store, config=get_settings(request))
