# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Password & Token Helpers — Unit Tests
======================================
Run:  pytest test_security.py -v
"""
from datetime import timedelta

import jwt
import pytest

from enrolment.core.config import settings
from enrolment.core.errors import Unauthenticated
from enrolment.core.security import (
    create_access_token, decode_access_token, extract_bearer_token,
    hash_password, verify_password,
)
from enrolment.models.domain import Role


class TestPasswords:
    def test_roundtrip(self):
        encoded = hash_password("password123", rounds=4)
        assert encoded.startswith("$2b$04$")
        assert verify_password("password123", encoded)
        assert not verify_password("password124", encoded)

    def test_salted(self):
        assert hash_password("same", rounds=4) != hash_password("same", rounds=4)

    def test_long_password_cut_at_72_bytes(self):
        encoded = hash_password("p" * 100, rounds=4)
        assert verify_password("p" * 100, encoded)
        assert verify_password("p" * 72, encoded)

    @pytest.mark.parametrize("encoded", ["", "plain-text", "pbkdf2_sha256$1$salt$hash", None])
    def test_malformed_hash_never_verifies(self, encoded):
        assert verify_password("password123", encoded) is False


class TestTokens:
    def test_decode_returns_identity(self):
        token = create_access_token(7, "john.doe", "EMPLOYEE")
        identity = decode_access_token(token)
        assert identity.id == 7
        assert identity.username == "john.doe"
        assert identity.role == Role.EMPLOYEE

    def test_expired(self):
        token = create_access_token(7, "john.doe", "EMPLOYEE", expires_in=timedelta(seconds=-5))
        with pytest.raises(Unauthenticated, match="expired"):
            decode_access_token(token)

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "7", "username": "x", "role": "HR_MANAGER"},
                           "another-secret", algorithm="HS256")
        with pytest.raises(Unauthenticated, match="Invalid authentication token"):
            decode_access_token(token)

    def test_unknown_role(self):
        token = jwt.encode({"sub": "7", "username": "x", "role": "ADMIN"},
                           settings.JWT_SECRET, algorithm="HS256")
        with pytest.raises(Unauthenticated):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(Unauthenticated):
            decode_access_token("not-a-jwt")


class TestBearer:
    def test_extract(self):
        assert extract_bearer_token("Bearer abc.def") == "abc.def"

    @pytest.mark.parametrize("header", [None, "", "abc", "Basic abc", "Bearer", "Bearer a b"])
    def test_rejects_other_shapes(self, header):
        assert extract_bearer_token(header) is None
