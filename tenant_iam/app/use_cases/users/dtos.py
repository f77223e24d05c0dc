"""
User Administration DTOs
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class CreateUserCommand(BaseModel):
    full_name: str
    email: str
    role_name: str


class UserSummary(BaseModel):
    user_id: str
    tenant_id: str
    email: str
    full_name: str
    status: str
    role_name: Optional[str]


class CreateUserResponse(BaseModel):
    code: str
    message: str
    data: UserSummary


class AdminResetData(BaseModel):
    user_id: str
    reset_method: str
    expires_at: Optional[datetime] = None
    sessions_invalidated: int


class AdminResetPasswordResponse(BaseModel):
    code: str
    message: str
    data: AdminResetData


class StatusChangeData(BaseModel):
    user_id: str
    old_status: str
    new_status: str
    sessions_invalidated: int


class StatusChangeResponse(BaseModel):
    code: str
    message: str
    data: StatusChangeData


class RoleChangeData(BaseModel):
    user_id: str
    old_role: Optional[str]
    new_role: str


class RoleChangeResponse(BaseModel):
    code: str
    message: str
    data: RoleChangeData


class SessionSummary(BaseModel):
    session_id: str
    status: str
    login_method: str
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime
    last_activity_at: datetime
    expires_at: datetime
    is_current: bool


class SessionListResponse(BaseModel):
    code: str
    message: str
    data: List[SessionSummary]


class RevokeSessionsData(BaseModel):
    revoked_count: int


class RevokeSessionsResponse(BaseModel):
    code: str
    message: str
    data: RevokeSessionsData
