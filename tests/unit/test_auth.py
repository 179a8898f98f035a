"""Unit tests for the auth dependency."""

import uuid

import pytest
from fastapi import HTTPException

from locallens.api.auth import DEV_USER_ID, get_current_context


@pytest.mark.asyncio
async def test_get_current_context_no_header_uses_dev_user() -> None:
    """Missing auth header falls back to the development user."""
    ctx = await get_current_context(authorization=None)

    assert ctx.user_id == DEV_USER_ID


@pytest.mark.asyncio
async def test_get_current_context_valid_token() -> None:
    """Bearer token carries the user id."""
    user_id = uuid.uuid4()

    ctx = await get_current_context(authorization=f"Bearer {user_id}")

    assert ctx.user_id == user_id


@pytest.mark.asyncio
async def test_get_current_context_invalid_bearer_format() -> None:
    """Invalid bearer format raises 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization="NotBearer token")

    assert exc_info.value.status_code == 401
    assert "Invalid authorization header format" in exc_info.value.detail


@pytest.mark.asyncio
async def test_get_current_context_invalid_uuid() -> None:
    """Token that is not a user id raises 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization="Bearer not-a-uuid")

    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
