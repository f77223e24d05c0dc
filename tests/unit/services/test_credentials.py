from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.use_cases.auth.validation import PASSWORD_PATTERN


def test_hash_and_verify():
    engine = CredentialEngine(rounds=4)
    password_hash = engine.hash_password("SecurePass123!")

    assert password_hash.startswith("$2b$04$")
    assert engine.verify_password("SecurePass123!", password_hash)
    assert not engine.verify_password("securepass123!", password_hash)


def test_verify_with_malformed_hash_returns_false():
    engine = CredentialEngine(rounds=4)

    assert engine.verify_password("SecurePass123!", "not-a-bcrypt-hash") is False


def test_tokens_are_random_hex():
    first = CredentialEngine.random_token()
    second = CredentialEngine.random_token()

    assert len(first) == 64
    assert first != second
    int(first, 16)


def test_sha256_is_stable():
    assert CredentialEngine.sha256("abc") == CredentialEngine.sha256("abc")
    assert CredentialEngine.sha256("abc") != "abc"


def test_temporary_password_meets_policy():
    for _ in range(50):
        password = CredentialEngine.generate_temporary_password()
        assert len(password) == 12
        assert PASSWORD_PATTERN.match(password)
