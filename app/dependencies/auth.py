from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from app.core.config import settings
from app.core.security import decode_access_token

# 1. SETUP BEARER (optional: the API stays usable with just X-Username)
bearer_scheme = HTTPBearer(auto_error=False)

# 2. GET ACTING USER (name recorded in the activity log)
async def get_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_username: Optional[str] = Header(default=None),
) -> str:
    """
    Who is making this request.

    A valid bearer token wins; otherwise the ``X-Username`` header sent by
    the frontend; otherwise ``Unknown``.
    """
    if credentials:
        username = decode_access_token(credentials.credentials)
        if username:
            return username

    return x_username or "Unknown"

# 3. SECURITY CODE GATE (register / password change / account delete)
def check_security_code(code: Optional[str]) -> None:
    if code != settings.SECRET_SECURITY_CODE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid security code"
        )
