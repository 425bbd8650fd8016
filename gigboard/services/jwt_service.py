"""
JWT service for Gigboard Service.
Validates bearer tokens issued by the auth service; this service never issues them.
"""

from typing import Optional, Dict, Any
from jose import JWTError, jwt
import logging

from ..core.config import config

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("user_id",)


class JWTService:
    """
    JWT service for token validation.
    """

    def __init__(self):
        self.secret_key: Optional[str] = None
        self.algorithm: Optional[str] = None
        self._initialized = False

    def initialize(self):
        """Initialize JWT configuration from secrets."""
        self.secret_key = config.get_jwt_secret()
        self.algorithm = config.get_jwt_algorithm()
        self._initialized = True

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token to verify

        Returns:
            Token payload if valid, None otherwise
        """
        if not self._initialized:
            logger.error("JWT service not initialized")
            return None

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])

            if not all(key in payload for key in REQUIRED_CLAIMS):
                return None

            payload["user_id"] = int(payload["user_id"])
            return payload

        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            return None
        except (TypeError, ValueError) as e:
            logger.warning(f"JWT carried an invalid user_id: {e}")
            return None
