from pydantic import BaseModel
from typing import Optional

# Fields are optional so the router can answer in the order the frontend
# expects: security code first, then missing fields.

class RegisterRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    security_code: Optional[str] = None

class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class LoginResponse(BaseModel):
    success: bool
    user: str
    access_token: str
    token_type: str

class PasswordChangeRequest(BaseModel):
    username: Optional[str] = None
    new_password: Optional[str] = None
    security_code: Optional[str] = None

class AccountDeleteRequest(BaseModel):
    username: Optional[str] = None
    security_code: Optional[str] = None

class MessageResponse(BaseModel):
    success: bool = True
    message: str
