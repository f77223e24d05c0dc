"""
Security tunables shared by the authentication services.

Built once from ApplicationConfig in the composition root and passed to
services by constructor, so tests can shrink windows and thresholds.
"""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class SecurityPolicy:
    bcrypt_rounds: int = 12

    session_duration: timedelta = timedelta(hours=8)
    remember_me_duration: timedelta = timedelta(days=30)
    restricted_session_duration: timedelta = timedelta(hours=1)

    max_login_attempts: int = 10
    lockout_duration: timedelta = timedelta(hours=1)
    max_failed_attempts_per_ip: int = 5
    rate_limit_window: timedelta = timedelta(minutes=15)

    reset_token_duration: timedelta = timedelta(hours=2)
    admin_reset_token_duration: timedelta = timedelta(hours=24)
    max_admin_resets_per_day: int = 3

    verification_token_duration: timedelta = timedelta(hours=24)
    max_verification_resends: int = 3
    verification_resend_window: timedelta = timedelta(minutes=15)

    @classmethod
    def from_config(cls, config) -> "SecurityPolicy":
        return cls(
            bcrypt_rounds=int(config.BCRYPT_ROUNDS),
            session_duration=timedelta(hours=config.SESSION_DURATION_HOURS),
            remember_me_duration=timedelta(days=config.REMEMBER_ME_DURATION_DAYS),
            restricted_session_duration=timedelta(
                hours=config.RESTRICTED_SESSION_DURATION_HOURS
            ),
            max_login_attempts=int(config.MAX_LOGIN_ATTEMPTS),
            lockout_duration=timedelta(hours=config.LOCKOUT_DURATION_HOURS),
            max_failed_attempts_per_ip=int(config.MAX_FAILED_ATTEMPTS_PER_IP),
            rate_limit_window=timedelta(minutes=config.RATE_LIMIT_WINDOW_MINUTES),
            reset_token_duration=timedelta(hours=config.RESET_TOKEN_DURATION_HOURS),
            admin_reset_token_duration=timedelta(
                hours=config.ADMIN_RESET_TOKEN_DURATION_HOURS
            ),
            max_admin_resets_per_day=int(config.MAX_ADMIN_RESETS_PER_DAY),
            verification_token_duration=timedelta(
                hours=config.VERIFICATION_TOKEN_DURATION_HOURS
            ),
            max_verification_resends=int(config.MAX_VERIFICATION_RESENDS),
            verification_resend_window=timedelta(
                minutes=config.VERIFICATION_RESEND_WINDOW_MINUTES
            ),
        )
