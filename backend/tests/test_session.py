from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import jwt

from zenhr.services.session import SessionRegistry


def test_issue_and_resolve() -> None:
    registry = SessionRegistry("test-secret")
    token = registry.issue("emp")
    assert registry.resolve(token) == "emp"
    assert len(registry) == 1


def test_each_login_gets_its_own_token() -> None:
    registry = SessionRegistry("test-secret")
    assert registry.issue("emp") != registry.issue("emp")
    assert len(registry) == 2


def test_revoke() -> None:
    registry = SessionRegistry("test-secret")
    token = registry.issue("emp")
    registry.revoke(token)
    assert registry.resolve(token) is None
    # Revoking twice is harmless.
    registry.revoke(token)


def test_revoke_user_drops_only_that_user() -> None:
    registry = SessionRegistry("test-secret")
    first = registry.issue("emp")
    second = registry.issue("emp")
    admin = registry.issue("admin")

    assert registry.revoke_user("emp") == 2

    assert registry.resolve(first) is None
    assert registry.resolve(second) is None
    assert registry.resolve(admin) == "admin"


def test_garbage_token() -> None:
    assert SessionRegistry("test-secret").resolve("not-a-jwt") is None


def test_token_signed_with_other_secret() -> None:
    token = SessionRegistry("other-secret").issue("emp")
    assert SessionRegistry("test-secret").resolve(token) is None


def test_unissued_token_with_valid_signature() -> None:
    registry = SessionRegistry("test-secret")
    forged = jwt.encode(
        {"sub": "admin", "type": "access", "exp": datetime.now(UTC) + timedelta(hours=1)},
        "test-secret",
        algorithm="HS256",
    )
    assert registry.resolve(forged) is None


def test_expired_token() -> None:
    registry = SessionRegistry("test-secret", ttl_hours=-1)
    token = registry.issue("emp")
    assert registry.resolve(token) is None


def test_empty_secret_generates_per_process_key() -> None:
    token = SessionRegistry().issue("emp")
    assert SessionRegistry().resolve(token) is None
