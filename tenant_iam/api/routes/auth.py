from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from tenant_iam.api.error import raise_for_error
from tenant_iam.api.utils.request_info import client_ip, user_agent
from tenant_iam.api.utils.timeout import run_with_timeout
from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionContext
from tenant_iam.app.services.tenant_seeder import TenantSeeder
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.app.use_cases.auth import (
    ChangePasswordResponse,
    ChangePasswordUseCase,
    CompletePasswordResetUseCase,
    LoginCommand,
    LoginResponse,
    LoginUseCase,
    LogoutUseCase,
    MessageResponse,
    PasswordResetCompleteResponse,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    ResendVerificationUseCase,
    VerifyEmailResponse,
    VerifyEmailUseCase,
)
from tenant_iam.depends import (
    get_credentials,
    get_current_session,
    get_deferred_notifier,
    get_policy,
    get_session_token,
    get_tenant_seeder,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Registration HTTP request payload

    Field formats (email, password strength, lengths) are checked by the
    use case so every rejection carries a stable error code.
    """

    full_name: str = Field(..., description="Owner's full name (2-100 chars)")
    email: str = Field(..., description="Owner's email address")
    password: str = Field(..., description="Password meeting the password policy")
    company_name: str = Field(..., description="Organization name (2-200 chars)")
    language: str = Field("persian", description="persian or arabic")
    locale: str = Field("iran", description="iran or uae")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
async def register(
    request: RegisterRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    notifier: Notifier = Depends(get_deferred_notifier),
    seeder: TenantSeeder = Depends(get_tenant_seeder),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Tenant Self-Registration

    Creates tenant, owner account, owner role grant and verification
    token in one transaction.

    Raises:
        - 400 Bad Request: Invalid field (VALIDATION_ERROR, INVALID_PASSWORD)
        - 409 Conflict: Email already registered
        - 500 Internal Server Error: Tenant creation failed
    """
    command = RegisterCommand(
        **request.model_dump(),
        ip_address=client_ip(http_request),
        user_agent=user_agent(http_request),
    )
    use_case = RegisterUseCase(uow, credentials, notifier, seeder, policy)
    result = await run_with_timeout(use_case.execute(command))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class LoginRequest(BaseModel):
    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password")
    remember_me: bool = Field(False, description="Extend the session to 30 days")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    User Login

    Returns the session token in the body and as an HttpOnly cookie.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: Account locked/deactivated, tenant suspended/inactive
        - 429 Too Many Requests: Too many failures from this address
    """
    command = LoginCommand(
        email=request.email,
        password=request.password,
        remember_me=request.remember_me,
        ip_address=client_ip(http_request),
        user_agent=user_agent(http_request),
    )
    use_case = LoginUseCase(uow, credentials, policy)
    result = await run_with_timeout(use_case.execute(command))

    if result.is_err():
        raise_for_error(result.error)

    data = result.value.data
    response.set_cookie(
        ApplicationConfig.SESSION_COOKIE_NAME,
        data.session_token,
        expires=data.session_expires_at.strftime("%a, %d %b %Y %H:%M:%S GMT"),
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Logout

    Idempotent: an unknown, expired or already ended session still
    answers LOGOUT_SUCCESS.
    """
    use_case = LogoutUseCase(uow, credentials, policy)
    result = await run_with_timeout(use_case.execute(token))

    if result.is_err():
        raise_for_error(result.error)

    response.delete_cookie(ApplicationConfig.SESSION_COOKIE_NAME)
    return result.value


class PasswordResetRequest(BaseModel):
    email: str = Field(..., description="Account email address")


@router.post(
    "/password-reset/request", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def request_password_reset(
    request: PasswordResetRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    notifier: Notifier = Depends(get_deferred_notifier),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Request Password Reset

    Security:
        - Same response whether or not the email is registered
    """
    use_case = RequestPasswordResetUseCase(uow, credentials, notifier, policy)
    result = await run_with_timeout(
        use_case.execute(request.email, client_ip(http_request), user_agent(http_request))
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class PasswordResetCompleteRequest(BaseModel):
    token: str = Field(..., description="Reset token from the email link")
    new_password: str = Field(..., description="New password")


@router.post(
    "/password-reset/complete",
    status_code=status.HTTP_200_OK,
    response_model=PasswordResetCompleteResponse,
)
async def complete_password_reset(
    request: PasswordResetCompleteRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Complete Password Reset

    Raises:
        - 400 Bad Request: Invalid token or weak password
        - 409 Conflict: Token already used
        - 410 Gone: Token expired
    """
    use_case = CompletePasswordResetUseCase(uow, credentials, policy)
    result = await run_with_timeout(
        use_case.execute(request.token, request.new_password, client_ip(http_request))
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., description="Email verification token")


@router.post("/verify-email", status_code=status.HTTP_200_OK, response_model=VerifyEmailResponse)
async def verify_email(
    request: VerifyEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Email Verification

    Raises:
        - 400 Bad Request: Invalid token
        - 409 Conflict: Already verified
        - 410 Gone: Expired token
    """
    use_case = VerifyEmailUseCase(uow, credentials, policy)
    result = await run_with_timeout(use_case.execute(request.token))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResendVerificationRequest(BaseModel):
    email: str = Field(..., description="Account email address")


@router.post(
    "/resend-verification", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def resend_verification(
    request: ResendVerificationRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    notifier: Notifier = Depends(get_deferred_notifier),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Resend Verification Email

    Security:
        - Same response for unknown, verified and rate-limited accounts
    """
    use_case = ResendVerificationUseCase(uow, credentials, notifier, policy)
    result = await run_with_timeout(
        use_case.execute(request.email, client_ip(http_request), user_agent(http_request))
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., description="New password")


@router.post(
    "/change-password", status_code=status.HTTP_200_OK, response_model=ChangePasswordResponse
)
async def change_password(
    request: ChangePasswordRequest,
    context: SessionContext = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Change Password

    The only route a restricted (password-reset-required) session may call.

    Raises:
        - 400 Bad Request: Weak password or same as current
        - 401 Unauthorized: Current password incorrect
    """
    use_case = ChangePasswordUseCase(uow, credentials, policy)
    result = await run_with_timeout(
        use_case.execute(
            context.user.id,
            context.session.id,
            context.is_restricted,
            request.current_password,
            request.new_password,
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
