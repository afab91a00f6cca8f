"""Admin endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.admin import AdminAuthRequest, AdminAuthResponse, AdminStatusResponse
from ...services.auth import AdminAuthorizationService, AuthFailureReason
from ..dependencies import get_admin_service

router = APIRouter(prefix="/admin", tags=["admin"])

_FAILURE_STATUS = {
    AuthFailureReason.INVALID_CREDENTIAL: (status.HTTP_401_UNAUTHORIZED, "Invalid admin password. Please try again."),
    AuthFailureReason.IDENTITY_REQUIRED: (status.HTTP_403_FORBIDDEN, "Sign in before requesting admin access."),
    AuthFailureReason.STORE_WRITE_FAILURE: (
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Admin access could not be saved. Please try again.",
    ),
}


@router.post("/authenticate", response_model=AdminAuthResponse, status_code=status.HTTP_200_OK)
def authenticate(
    payload: AdminAuthRequest,
    service: AdminAuthorizationService = Depends(get_admin_service),
) -> AdminAuthResponse:
    result = service.authenticate(payload.credential)
    if not result.success:
        status_code, detail = _FAILURE_STATUS[result.reason]
        raise HTTPException(status_code=status_code, detail=detail)
    return AdminAuthResponse(success=True, identity=result.identity, admin_mode=service.state.admin_mode)


@router.get("/status", response_model=AdminStatusResponse, status_code=status.HTTP_200_OK)
def admin_status(service: AdminAuthorizationService = Depends(get_admin_service)) -> AdminStatusResponse:
    identity = service.identity_provider.current_identity()
    return AdminStatusResponse(
        identity=identity,
        is_admin=service.is_admin(identity),
        admin_mode=service.state.admin_mode,
        last_login_at=service.state.last_login_at,
    )
