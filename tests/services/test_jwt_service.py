"""
Tests for JWT token verification.
"""

import time
from jose import jwt

from gigboard.services.jwt_service import JWTService


def _service() -> JWTService:
    jwt_service = JWTService()
    jwt_service.secret_key = "test-secret-key"
    jwt_service.algorithm = "HS256"
    jwt_service._initialized = True
    return jwt_service


class TestJWTVerification:
    """Test cases for JWT token verification."""

    def test_verify_token_not_initialized(self):
        assert JWTService().verify_token("invalid-token") is None

    def test_verify_token_valid(self):
        jwt_service = _service()
        token = jwt.encode(
            {"user_id": "7", "email": "ravi@example.com", "exp": int(time.time()) + 3600},
            jwt_service.secret_key,
            algorithm=jwt_service.algorithm
        )

        result = jwt_service.verify_token(token)

        assert result["user_id"] == 7
        assert result["email"] == "ravi@example.com"

    def test_verify_token_invalid_signature(self):
        token = jwt.encode({"user_id": 1}, "wrong-secret", algorithm="HS256")
        assert _service().verify_token(token) is None

    def test_verify_token_expired(self):
        jwt_service = _service()
        token = jwt.encode(
            {"user_id": 1, "exp": int(time.time()) - 10},
            jwt_service.secret_key,
            algorithm=jwt_service.algorithm
        )
        assert jwt_service.verify_token(token) is None

    def test_verify_token_missing_user_id(self):
        jwt_service = _service()
        token = jwt.encode({"email": "x@example.com"}, jwt_service.secret_key, algorithm="HS256")
        assert jwt_service.verify_token(token) is None

    def test_verify_token_non_numeric_user_id(self):
        jwt_service = _service()
        token = jwt.encode({"user_id": "abc"}, jwt_service.secret_key, algorithm="HS256")
        assert jwt_service.verify_token(token) is None

    def test_initialize_reads_config(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "from-env")
        monkeypatch.setenv("JWT_ALGORITHM", "HS512")

        jwt_service = JWTService()
        jwt_service.initialize()

        assert jwt_service.secret_key == "from-env"
        assert jwt_service.algorithm == "HS512"
