"""Tests for JWT helpers."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from backend.app.core.auth.jwt_auth import create_access_token, decode_access_token


def test_token_round_trip_returns_subject():
    token = create_access_token({"sub": "google-sub-1", "email": "ada@example.com"})

    assert decode_access_token(token) == "google-sub-1"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "google-sub-1"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(HTTPException) as exc_info:
        decode_access_token(token)
    assert exc_info.value.status_code == 401


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"sub": "google-sub-1"}, "someone-else", algorithm="HS256")

    with pytest.raises(HTTPException) as exc_info:
        decode_access_token(token)
    assert exc_info.value.detail == "Invalid authentication token"


def test_token_without_subject_is_rejected():
    token = create_access_token({"email": "ada@example.com"})

    with pytest.raises(HTTPException) as exc_info:
        decode_access_token(token)
    assert exc_info.value.status_code == 401
