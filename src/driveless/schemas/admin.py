"""Admin authentication schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AdminAuthRequest(BaseModel):
    credential: str = Field(..., min_length=1, description="Shared admin passphrase.")


class AdminAuthResponse(BaseModel):
    success: bool
    identity: Optional[str] = None
    admin_mode: bool


class AdminStatusResponse(BaseModel):
    identity: Optional[str] = None
    is_admin: bool
    admin_mode: bool
    last_login_at: Optional[datetime] = None
