from typing import Dict, NoReturn

from fastapi import status

from tenant_iam.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(
        self, base_error: Error, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


CLIENT_ERROR_STATUS: Dict[str, int] = {
    # Validation
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "INVALID_ROLE": status.HTTP_400_BAD_REQUEST,
    "INVALID_STATUS": status.HTTP_400_BAD_REQUEST,
    "INVALID_TOKEN": status.HTTP_400_BAD_REQUEST,
    # Conflict
    "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "TOKEN_ALREADY_USED": status.HTTP_409_CONFLICT,
    "MAX_USERS_REACHED": status.HTTP_409_CONFLICT,
    "ALREADY_VERIFIED": status.HTTP_409_CONFLICT,
    # Unauthorized
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "SESSION_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    "CURRENT_PASSWORD_INCORRECT": status.HTTP_401_UNAUTHORIZED,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_API_KEY": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_410_GONE,
    # Forbidden
    "ACCOUNT_LOCKED": status.HTTP_403_FORBIDDEN,
    "ACCOUNT_DEACTIVATED": status.HTTP_403_FORBIDDEN,
    "TENANT_SUSPENDED": status.HTTP_403_FORBIDDEN,
    "TENANT_INACTIVE": status.HTTP_403_FORBIDDEN,
    "PERMISSION_DENIED": status.HTTP_403_FORBIDDEN,
    "PASSWORD_CHANGE_REQUIRED": status.HTTP_403_FORBIDDEN,
    "INSUFFICIENT_ROLE_PRIVILEGES": status.HTTP_403_FORBIDDEN,
    # Not found
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ROLE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    # Rate limited
    "RATE_LIMIT_EXCEEDED": status.HTTP_429_TOO_MANY_REQUESTS,
}

SERVER_ERROR_STATUS: Dict[str, int] = {
    "SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def raise_for_error(error: Error) -> NoReturn:
    """
    Raise the ClientError/ServerError matching a use-case error code.

    Unknown codes (INTERNAL_ERROR, TENANT_CREATION_FAILED, DATABASE_ERROR)
    become a 500.
    """
    status_code = CLIENT_ERROR_STATUS.get(error.code)
    if status_code is not None:
        raise ClientError(error, status_code=status_code)
    raise ServerError(
        error,
        status_code=SERVER_ERROR_STATUS.get(
            error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
    )
