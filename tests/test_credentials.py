from datetime import datetime, timedelta, timezone

import jwt
import pytest

from credentials import CredentialService
from errors import InvalidToken


@pytest.fixture
def service():
    return CredentialService("s3cret", timedelta(days=15), rounds=4)


def test_password_hash_is_salted_and_verifies(service):
    first = service.hash_password("hunter2")
    second = service.hash_password("hunter2")
    assert first != second
    assert "hunter2" not in first
    assert service.verify_password("hunter2", first)
    assert not service.verify_password("hunter3", first)


def test_verify_password_rejects_malformed_hash(service):
    assert not service.verify_password("hunter2", "plaintext")


def test_token_round_trip(service):
    token = service.issue_token(42)
    assert service.verify_token(token) == 42


def test_token_expires_after_fifteen_days(service):
    issued = datetime.now(timezone.utc) - timedelta(days=15, seconds=1)
    token = service.issue_token(42, now=issued)
    with pytest.raises(InvalidToken):
        service.verify_token(token)


def test_token_still_valid_just_before_expiry(service):
    issued = datetime.now(timezone.utc) - timedelta(days=14, hours=23)
    assert service.verify_token(service.issue_token(7, now=issued)) == 7


def test_token_signed_with_other_secret_is_rejected(service):
    other = CredentialService("other-secret", timedelta(days=15), rounds=4)
    with pytest.raises(InvalidToken):
        service.verify_token(other.issue_token(42))


def test_garbage_token_is_rejected(service):
    with pytest.raises(InvalidToken):
        service.verify_token("not.a.token")


def test_token_without_user_id_is_rejected(service):
    token = jwt.encode({"exp": datetime.now(timezone.utc) + timedelta(days=1)},
                       "s3cret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        service.verify_token(token)


def test_missing_secret_is_fatal():
    with pytest.raises(ValueError):
        CredentialService("", timedelta(days=15))
