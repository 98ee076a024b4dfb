from datetime import timedelta

import pytest

from dayflow.auth.tokens import TokenService
from dayflow.core.exceptions import AuthenticationError


def _tokens(clock):
    return TokenService(
        secret="access-secret",
        refresh_secret="refresh-secret",
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
        clock=clock,
    )


def test_access_token_resolves_to_user_id(clock):
    tokens = _tokens(clock)
    assert tokens.decode_access(tokens.issue_access(42)) == 42


def test_access_token_expires_after_ttl(clock):
    tokens = _tokens(clock)
    token = tokens.issue_access(42)

    clock.advance(minutes=16)

    with pytest.raises(AuthenticationError, match="Token expired"):
        tokens.decode_access(token)


def test_refresh_token_is_not_accepted_as_access_token(clock):
    tokens = _tokens(clock)
    refresh = tokens.issue_refresh(7)

    with pytest.raises(AuthenticationError):
        tokens.decode_access(refresh)
    assert tokens.decode_refresh(refresh) == 7


def test_every_refresh_token_is_distinct(clock):
    tokens = _tokens(clock)
    assert tokens.issue_refresh(7) != tokens.issue_refresh(7)


def test_tampered_token_is_rejected(clock):
    tokens = _tokens(clock)
    token = tokens.issue_access(1)

    with pytest.raises(AuthenticationError, match="Invalid token"):
        tokens.decode_access(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))
