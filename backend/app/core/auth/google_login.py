"""
Google authentication endpoint.

Frontend should obtain a Google ID token (e.g. via @react-oauth/google)
and POST it to /auth/google. Backend verifies it with Google, upserts the
user in MongoDB, and returns a JWT for authenticated access.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from backend.app.core.auth.jwt_auth import create_access_token, get_current_user
from backend.app.core.config import Settings, get_app_settings
from backend.app.core.db.mongo import MongoConnection, get_mongo
from backend.app.observability.logging import log_event


router = APIRouter(prefix="/auth", tags=["auth"])

GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"


class GoogleLoginRequest(BaseModel):
    id_token: str


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserProfile(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "UserProfile":
        return cls(
            id=str(doc["_id"]),
            email=str(doc.get("email") or ""),
            name=doc.get("name"),
            picture=doc.get("picture"),
        )


async def verify_google_id_token(id_token: str, client_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Verify Google ID token via Google's tokeninfo endpoint.

    The audience is only checked when a client_id is given.
    """
    async with httpx.AsyncClient(timeout=10) as client:
        resp = await client.get(GOOGLE_TOKENINFO_URL, params={"id_token": id_token})
    if resp.status_code != 200:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Google ID token",
        )
    data = resp.json()
    # Verify audience (client_id)
    if client_id and data.get("aud") != client_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Google client_id",
        )
    return data


async def upsert_google_user(mongo: MongoConnection, token_info: Dict[str, Any]) -> Dict[str, Any]:
    """Create or refresh the user document keyed by the Google subject."""
    email = token_info.get("email")
    sub = token_info.get("sub")
    if not email or not sub:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Google token missing email or sub",
        )

    now = datetime.now(timezone.utc)
    users = mongo["users"]
    normalized_email = str(email).strip().lower()
    existing = await users.find_one({"google_id": sub})
    if existing:
        await users.update_one(
            {"_id": existing["_id"]},
            {"$set": {
                "email": normalized_email,
                "name": token_info.get("name") or existing.get("name"),
                "picture": token_info.get("picture") or existing.get("picture"),
                "updated_at": now,
            }},
        )
        return await users.find_one({"_id": existing["_id"]}) or existing

    doc = {
        "_id": str(sub),  # use Google sub as primary id
        "email": normalized_email,
        "google_id": sub,
        "name": token_info.get("name"),
        "picture": token_info.get("picture"),
        "created_at": now,
        "updated_at": now,
    }
    await users.insert_one(doc)
    return doc


@router.post("/google", response_model=AuthResponse)
async def login_with_google(
    payload: GoogleLoginRequest,
    mongo: MongoConnection = Depends(get_mongo),
    settings: Settings = Depends(get_app_settings),
):
    """
    Login endpoint for Google ID token.

    - Verifies Google ID token with Google
    - Upserts user in MongoDB using sub/email
    - Returns JWT (access_token) for use with authenticated endpoints
    """
    token_info = await verify_google_id_token(payload.id_token, client_id=settings.google_client_id)
    user = await upsert_google_user(mongo, token_info)

    log_event("google_login_succeeded", user_id=str(user["_id"]))
    access_token = create_access_token(
        {"sub": str(user["_id"]), "email": user["email"]},
        settings=settings,
    )
    return AuthResponse(access_token=access_token)


@router.get("/me", response_model=UserProfile)
async def me(user: dict = Depends(get_current_user)):
    return UserProfile.from_document(user)
