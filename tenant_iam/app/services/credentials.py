"""
Credential Engine

Password hashing and opaque token generation.
"""

import hashlib
import secrets
import string

import bcrypt

# Stand-in hash checked when the account does not exist, so the response
# time does not reveal whether an email is registered.
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(4))

TEMPORARY_PASSWORD_SPECIALS = "@$!%*?&"


class CredentialEngine:
    """
    Business Rules:
    - bcrypt with a tunable cost factor (12 in production)
    - verify never raises on a malformed stored hash, it returns False
    - Tokens are hex strings from the OS CSPRNG; only their SHA-256
      digest is stored
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self.rounds)).decode(
            "utf-8"
        )

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False

    def burn_verification(self, password: str) -> None:
        """Spend the same work as a real check against a throwaway hash"""
        bcrypt.checkpw(password.encode("utf-8"), _DUMMY_HASH)

    @staticmethod
    def random_token(n_bytes: int = 32) -> str:
        return secrets.token_hex(n_bytes)

    @staticmethod
    def sha256(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @staticmethod
    def generate_temporary_password(length: int = 12) -> str:
        """Random password that satisfies the password policy"""
        alphabet = string.ascii_letters + string.digits + TEMPORARY_PASSWORD_SPECIALS
        required = [
            secrets.choice(string.ascii_lowercase),
            secrets.choice(string.ascii_uppercase),
            secrets.choice(string.digits),
            secrets.choice(TEMPORARY_PASSWORD_SPECIALS),
        ]
        rest = [secrets.choice(alphabet) for _ in range(length - len(required))]
        chars = required + rest
        secrets.SystemRandom().shuffle(chars)
        return "".join(chars)
