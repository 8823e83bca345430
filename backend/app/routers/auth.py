# backend/app/routers/auth.py
from app.core.auth import get_current_user
from datetime import timedelta, datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field, field_validator
from typing import Optional
import logging
from app.core.database import get_db
from app.core.security import verify_password, get_password_hash, create_access_token
from app.models.user import User
from app.config import settings

router = APIRouter()
logger = logging.getLogger(__name__)

# ── Request / Response models ─────────────────────────────────────

class Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("Invalid email address")
        return value

class UserResponse(BaseModel):
    id: str
    email: str
    last_login_at: Optional[datetime] = None

class AuthResponse(UserResponse):
    access_token: str
    token_type: str = "bearer"

# ── Helpers ───────────────────────────────────────────────────────

def _user_out(user: User) -> dict:
    return {"id": str(user.id), "email": user.email, "last_login_at": user.last_login_at}

def _client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
    return forwarded_for or (request.client.host if request.client else "unknown")

def _issue_session(user: User, response: Response) -> dict:
    """Create a token and mirror it into an HTTP-only cookie for browser clients."""
    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token(data={"sub": str(user.id)}, expires_delta=expires)
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=int(expires.total_seconds()),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    return {**_user_out(user), "access_token": token, "token_type": "bearer"}

# ── Public: registration ──────────────────────────────────────────

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: Credentials, response: Response, db: Session = Depends(get_db)):
    """Create an account and sign it in."""
    if db.query(User).filter(User.email == data.email).first():
        raise HTTPException(status.HTTP_409_CONFLICT, "Email already registered")

    user = User(email=data.email, password_hash=get_password_hash(data.password), is_active=True)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        db.rollback()
        raise HTTPException(status.HTTP_409_CONFLICT, "Email already registered")
    db.refresh(user)

    logger.info("AUTH_REGISTER user_id=%s email=%s", user.id, user.email)
    return _issue_session(user, response)

# ── Public: login / logout ────────────────────────────────────────

@router.post("/login", response_model=AuthResponse)
async def login(data: Credentials, request: Request, response: Response, db: Session = Depends(get_db)):
    """Login and get access token"""
    client_ip = _client_ip(request)
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning("AUTH_LOGIN_FAILED email=%s ip=%s reason=bad_credentials", data.email, client_ip)
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Incorrect email or password")
    if not user.is_active:
        logger.warning("AUTH_LOGIN_BLOCKED user_id=%s ip=%s reason=inactive", user.id, client_ip)
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Inactive user")

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    logger.info("AUTH_LOGIN_SUCCESS user_id=%s email=%s ip=%s", user.id, user.email, client_ip)
    return _issue_session(user, response)

@router.post("/logout")
async def logout(response: Response):
    """Drop the session cookie (bearer tokens stay valid until they expire)."""
    response.delete_cookie(settings.COOKIE_NAME)
    return {"ok": True}

# ── Authenticated: current user ───────────────────────────────────

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return _user_out(current_user)
