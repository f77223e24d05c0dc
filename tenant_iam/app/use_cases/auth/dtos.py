"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth domain. Every response
carries a machine-readable ``code`` (also the message key clients
localize) and an English ``message``.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


# ============================================================================
# Commands
# ============================================================================


class RegisterCommand(BaseModel):
    """Validated self-registration intent"""

    full_name: str
    email: str
    password: str
    company_name: str
    language: str = "persian"
    locale: str = "iran"
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class LoginCommand(BaseModel):
    email: str
    password: str
    remember_me: bool = False
    ip_address: str = "unknown"
    user_agent: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class MessageResponse(BaseModel):
    """Response carrying only a code and a message"""

    code: str
    message: str


class RegistrationData(BaseModel):
    user_id: str
    tenant_id: str
    email: str
    redirect_url: str = "/login"


class RegisterResponse(BaseModel):
    code: str
    message: str
    data: RegistrationData


class LoginData(BaseModel):
    user_id: str
    tenant_id: str
    email: str
    full_name: str
    role_name: Optional[str]
    permissions: List[str]
    redirect_url: str
    session_token: str
    session_expires_at: datetime
    remember_me_enabled: bool


class LoginResponse(BaseModel):
    code: str
    message: str
    data: LoginData


class VerifyEmailData(BaseModel):
    user_id: str
    email: str
    verified_at: datetime
    redirect_url: str = "/login"


class VerifyEmailResponse(BaseModel):
    code: str
    message: str
    data: VerifyEmailData


class RedirectData(BaseModel):
    redirect_url: str = "/login"


class PasswordResetCompleteResponse(BaseModel):
    code: str
    message: str
    data: RedirectData


class ChangePasswordData(BaseModel):
    sessions_invalidated: int
    redirect_url: str


class ChangePasswordResponse(BaseModel):
    code: str
    message: str
    data: ChangePasswordData
