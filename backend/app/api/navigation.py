"""
Navigation endpoints consumed by the frontend shell.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from backend.app.core.auth.jwt_auth import get_optional_user
from backend.app.core.config import Settings, get_app_settings
from backend.app.navigation.sidebar import build_sidebar


router = APIRouter(prefix="/api/v1/navigation", tags=["navigation"])


class NavLinkResponse(BaseModel):
    label: str
    route: str
    active: bool


class LoginLinkResponse(BaseModel):
    label: str
    route: str


class SidebarResponse(BaseModel):
    signed_in: bool
    logo_route: str
    sections: list[list[NavLinkResponse]]
    show_user_button: bool
    login: Optional[LoginLinkResponse] = None


@router.get("/sidebar", response_model=SidebarResponse)
async def sidebar(
    pathname: str = Query("/", description="Route the client is currently on"),
    user: Optional[dict[str, Any]] = Depends(get_optional_user),
    settings: Settings = Depends(get_app_settings),
):
    return build_sidebar(user, pathname, sign_in_route=settings.sign_in_route)
