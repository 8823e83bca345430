# backend/app/core/auth.py
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from app.config import settings
from app.core.database import get_db
from app.core.security import decode_access_token
from app.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)

_UNAUTHORIZED = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Not authenticated",
    headers={"WWW-Authenticate": "Bearer"},
)


def _token_from_request(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header wins; browsers send the session cookie instead."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.COOKIE_NAME)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    token = _token_from_request(request, credentials)
    if not token:
        raise _UNAUTHORIZED

    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise _UNAUTHORIZED

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise _UNAUTHORIZED

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise _UNAUTHORIZED
    return user
