"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import select, insert

from app.db.postgres import get_db_session
from app.db.tables import users
from app.core.auth import hash_password, verify_password, create_access_token, get_current_user
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    After registration, login to get access token.
    """
    email = request.email.lower()
    with get_db_session() as db:
        # Check email exists
        existing = db.execute(select(users.c.id).where(users.c.email == email)).fetchone()
        if existing:
            raise HTTPException(status_code=400, detail="Email already registered")

        db.execute(
            insert(users).values(
                email=email,
                password_hash=hash_password(request.password),
                name=request.name,
                role=request.role.value,
                phone=request.phone,
            )
        )

    logger.info("Registered %s account %s", request.role.value, email)
    return MessageResponse(message=f"Registered successfully as {request.role.value}. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        user = db.execute(
            select(users.c.id, users.c.password_hash, users.c.name, users.c.role, users.c.is_active)
            .where(users.c.email == request.email.lower())
        ).fetchone()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    if not verify_password(request.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data={"sub": str(user.id), "role": user.role})

    return TokenResponse(access_token=token, user_id=user.id, role=user.role, name=user.name)


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    with get_db_session() as db:
        row = db.execute(select(users).where(users.c.id == user["user_id"])).mappings().first()

    return UserResponse(
        user_id=row["id"], email=row["email"], name=row["name"], role=row["role"],
        phone=row["phone"], is_active=row["is_active"], created_at=row["created_at"]
    )
