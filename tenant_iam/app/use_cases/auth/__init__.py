"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .validate_session_use_case import ValidateSessionUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .complete_password_reset_use_case import CompletePasswordResetUseCase
from .change_password_use_case import ChangePasswordUseCase
from .dtos import (
    ChangePasswordData,
    ChangePasswordResponse,
    LoginCommand,
    LoginData,
    LoginResponse,
    MessageResponse,
    PasswordResetCompleteResponse,
    RedirectData,
    RegisterCommand,
    RegisterResponse,
    RegistrationData,
    VerifyEmailData,
    VerifyEmailResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "ValidateSessionUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "RequestPasswordResetUseCase",
    "CompletePasswordResetUseCase",
    "ChangePasswordUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "LoginCommand",
    # DTOs - Responses
    "MessageResponse",
    "RegisterResponse",
    "LoginResponse",
    "VerifyEmailResponse",
    "PasswordResetCompleteResponse",
    "ChangePasswordResponse",
    # DTOs - Nested Models
    "RegistrationData",
    "LoginData",
    "VerifyEmailData",
    "RedirectData",
    "ChangePasswordData",
]
