from datetime import datetime

from fastapi import APIRouter, HTTPException, status

from app.models.user import User
from app.schemas.user import PasswordChangeRequest, AccountDeleteRequest, MessageResponse
from app.core.security import get_password_hash
from app.dependencies.auth import check_security_code
from app.services.activity import log_activity

router = APIRouter()


async def _get_user(username: str) -> User:
    user = await User.find_one(User.username == username)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


# ---------------------------------------------------------
# 1. CHANGE PASSWORD
# ---------------------------------------------------------
@router.put("/account/password", response_model=MessageResponse)
async def change_password(data: PasswordChangeRequest):
    check_security_code(data.security_code)

    if not data.username or not data.new_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing username or new password"
        )

    user = await _get_user(data.username)
    user.hashed_password = get_password_hash(data.new_password)
    user.updated_at = datetime.utcnow()
    await user.save()

    await log_activity(user.username, "Changed account password")
    return {"success": True, "message": "Password updated successfully"}


# ---------------------------------------------------------
# 2. DELETE ACCOUNT
# ---------------------------------------------------------
@router.delete("/account", response_model=MessageResponse)
async def delete_account(data: AccountDeleteRequest):
    check_security_code(data.security_code)

    if not data.username:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing username"
        )

    user = await _get_user(data.username)
    await user.delete()

    await log_activity(data.username, "Deleted own account")
    return {"success": True, "message": "Account deleted successfully"}
