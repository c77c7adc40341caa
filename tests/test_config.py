"""Unit tests for core/config.py -- Settings validation.

Covers:
- production mode without SECRET_KEY refuses to start
- dev mode generates a key of sufficient length
- short keys are rejected in both modes
- bcrypt cost and token lifetime bounds
"""

from __future__ import annotations

import pytest

from core.config import Settings

GOOD_KEY = "k" * 32


def test_production_requires_secret_key() -> None:
    with pytest.raises(ValueError, match="SECRET_KEY is required"):
        Settings(_env_file=None, debug=False, secret_key="")


def test_debug_generates_secret_key() -> None:
    settings = Settings(_env_file=None, debug=True, secret_key="")
    assert len(settings.secret_key) >= 32


def test_short_secret_key_rejected() -> None:
    with pytest.raises(ValueError, match="at least 32 characters"):
        Settings(_env_file=None, debug=True, secret_key="short")


def test_explicit_secret_key_kept() -> None:
    settings = Settings(_env_file=None, debug=False, secret_key=GOOD_KEY)
    assert settings.secret_key == GOOD_KEY


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_out_of_range(rounds: int) -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, secret_key=GOOD_KEY, bcrypt_rounds=rounds)


def test_token_expiry_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, secret_key=GOOD_KEY, token_expire_seconds=0)


def test_defaults() -> None:
    settings = Settings(_env_file=None, secret_key=GOOD_KEY, bcrypt_rounds=12)
    assert settings.token_expire_seconds == 86400
    assert settings.bcrypt_rounds == 12
    assert settings.database_url.startswith("sqlite:///")
