import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./tenant_iam.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Credentials
    BCRYPT_ROUNDS = data.get("BCRYPT_ROUNDS", 12)

    # Sessions
    SESSION_DURATION_HOURS = data.get("SESSION_DURATION_HOURS", 8)
    REMEMBER_ME_DURATION_DAYS = data.get("REMEMBER_ME_DURATION_DAYS", 30)
    RESTRICTED_SESSION_DURATION_HOURS = data.get("RESTRICTED_SESSION_DURATION_HOURS", 1)
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "session")
    SESSION_COOKIE_SECURE = bool(data.get("SESSION_COOKIE_SECURE", False))

    # Lockout & rate limiting
    MAX_LOGIN_ATTEMPTS = data.get("MAX_LOGIN_ATTEMPTS", 10)
    LOCKOUT_DURATION_HOURS = data.get("LOCKOUT_DURATION_HOURS", 1)
    MAX_FAILED_ATTEMPTS_PER_IP = data.get("MAX_FAILED_ATTEMPTS_PER_IP", 5)
    RATE_LIMIT_WINDOW_MINUTES = data.get("RATE_LIMIT_WINDOW_MINUTES", 15)

    # One-time tokens
    RESET_TOKEN_DURATION_HOURS = data.get("RESET_TOKEN_DURATION_HOURS", 2)
    ADMIN_RESET_TOKEN_DURATION_HOURS = data.get("ADMIN_RESET_TOKEN_DURATION_HOURS", 24)
    MAX_ADMIN_RESETS_PER_DAY = data.get("MAX_ADMIN_RESETS_PER_DAY", 3)
    VERIFICATION_TOKEN_DURATION_HOURS = data.get("VERIFICATION_TOKEN_DURATION_HOURS", 24)
    MAX_VERIFICATION_RESENDS = data.get("MAX_VERIFICATION_RESENDS", 3)
    VERIFICATION_RESEND_WINDOW_MINUTES = data.get("VERIFICATION_RESEND_WINDOW_MINUTES", 15)

    STORE_TIMEOUT_SECONDS = data.get("STORE_TIMEOUT_SECONDS", 10)
