"""
Admin session checks for the web API.

The session cookie ("session") holds an HS256 JWT whose `sub` is the
user's database id. Tokens are issued by the members app that shares
JWT_SECRET; this API only verifies them and checks the admin flag.
"""

import os
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException, Request

JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24
SESSION_COOKIE = "session"


def _get_secret() -> str:
    secret = os.environ.get("JWT_SECRET")
    if not secret:
        raise ValueError("JWT_SECRET environment variable not set")
    return secret


def create_jwt(user_id: int, email: str | None = None) -> str:
    """Sign a session token for `user_id`, valid for JWT_EXPIRATION_HOURS."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
    }
    return jwt.encode(payload, _get_secret(), algorithm=JWT_ALGORITHM)


def verify_jwt(token: str) -> dict | None:
    """Decoded payload, or None if the token is malformed, tampered or expired."""
    try:
        return jwt.decode(token, _get_secret(), algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None


async def get_current_user(request: Request) -> dict:
    """
    FastAPI dependency returning the session's JWT payload.

    Raises:
        HTTPException: 401 if there is no session cookie or it doesn't verify
    """
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = verify_jwt(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return payload


async def require_admin(payload: dict = Depends(get_current_user)) -> dict:
    """
    FastAPI dependency that only lets admins through.

    Returns:
        The admin's user record

    Raises:
        HTTPException: 401 if the session's user no longer exists,
            403 if the user is not an admin
    """
    from core.database import get_connection
    from core.queries.users import get_user_by_id, is_admin

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    async with get_connection() as conn:
        user = await get_user_by_id(conn, user_id)
        if not user:
            raise HTTPException(status_code=401, detail="User not found")
        if not await is_admin(conn, user_id):
            raise HTTPException(status_code=403, detail="Admin access required")

    return user
