from __future__ import annotations

from datetime import timedelta

import pytest

from poetportal.core.errors import TokenExpired, TokenInvalid
from poetportal.core.security import TokenIssuer, hash_password, verify_password
from poetportal.db.models.user import User


def test_hash_uses_fresh_salt_and_both_verify():
    first = hash_password("correct horse")
    second = hash_password("correct horse")

    assert first != second
    assert verify_password("correct horse", first)
    assert verify_password("correct horse", second)


def test_hash_format_is_derived_dot_salt():
    derived, salt = hash_password("pw123456").split(".")
    assert len(derived) == 128
    assert len(salt) == 32
    int(derived, 16)
    int(salt, 16)


def test_wrong_password_does_not_verify():
    digest = hash_password("right-password")
    assert not verify_password("wrong-password", digest)


@pytest.mark.parametrize("stored", ["", "nodot", "zz.zz", ".abcd", "abcd."])
def test_malformed_digest_does_not_verify(stored):
    assert not verify_password("anything", stored)


def _user(user_id=7, username="alice", is_admin=False):
    return User(id=user_id, username=username, is_admin=is_admin)


def test_token_round_trip_carries_identity():
    issuer = TokenIssuer("secret-a")
    data = issuer.validate(issuer.issue(_user(is_admin=True)))

    assert data.user_id == 7
    assert data.username == "alice"
    assert data.is_admin is True


def test_expired_token_is_rejected_as_expired():
    issuer = TokenIssuer("secret-a", lifetime=timedelta(seconds=-30))
    with pytest.raises(TokenExpired):
        issuer.validate(issuer.issue(_user()))


def test_rotating_secret_invalidates_tokens():
    token = TokenIssuer("secret-a").issue(_user())
    with pytest.raises(TokenInvalid):
        TokenIssuer("secret-b").validate(token)


def test_garbage_token_is_invalid():
    with pytest.raises(TokenInvalid):
        TokenIssuer("secret-a").validate("not.a.jwt")


def test_unknown_user_id_still_validates():
    issuer = TokenIssuer("secret-a")
    data = issuer.validate(issuer.issue(_user(user_id=99999, username="ghost")))
    assert data.user_id == 99999
