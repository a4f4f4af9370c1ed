import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from pymongo.errors import DuplicateKeyError

from app.models.user import User
from app.schemas.user import RegisterRequest, LoginRequest, LoginResponse, MessageResponse
from app.core.security import get_password_hash, verify_password, create_access_token
from app.dependencies.auth import check_security_code
from app.services.activity import log_activity

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------
# 1. REGISTER (Security Code Gated)
# ---------------------------------------------------------
@router.post("/register", response_model=MessageResponse)
async def register(data: RegisterRequest):
    check_security_code(data.security_code)

    if not data.username or not data.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing username or password"
        )

    if await User.find_one(User.username == data.username):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists"
        )

    try:
        await User(
            username=data.username,
            hashed_password=get_password_hash(data.password),
        ).insert()
    except DuplicateKeyError:
        # Lost a race with a concurrent registration of the same name
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists"
        )

    logger.info("Registered user %s", data.username)
    await log_activity("System", f"Registered user: {data.username}")
    return {"success": True, "message": "Registration successful"}


# ---------------------------------------------------------
# 2. LOGIN ENDPOINT (Get Token)
# ---------------------------------------------------------
@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest):
    if not data.username or not data.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing credentials"
        )

    user = await User.find_one(User.username == data.username)

    if not user or not verify_password(data.password, user.hashed_password):
        logger.warning("Failed login for %s", data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user.last_login = datetime.utcnow()
    await user.save()

    await log_activity(user.username, "Logged in")

    return {
        "success": True,
        "user": user.username,
        "access_token": create_access_token(data={"sub": user.username}),
        "token_type": "bearer",
    }
