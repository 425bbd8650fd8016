"""
Configuration management for Gigboard Service.
Uses Zero Python SDK for secure configuration, with environment overrides.
"""

import os
from urllib.parse import quote_plus
from typing import Dict, Any, Optional, List
import logging
from zero_python_sdk import zero

logger = logging.getLogger(__name__)


class ZeroSecretsManager:
    """
    Zero secrets client using the official Zero Python SDK.
    Environment variables take precedence over fetched secrets.
    """

    def __init__(self, zero_token: Optional[str], caller_name: str = "gigboard"):
        self.zero_token = zero_token
        self.caller_name = caller_name
        self._cache: Dict[str, Any] = {}
        self._secrets: Optional[Dict[str, Any]] = None

    def _fetch_secrets(self):
        """Fetch secrets from Zero if not already cached."""
        if self._secrets is not None:
            return
        if not self.zero_token:
            self._secrets = {}
            return
        try:
            self._secrets = zero(
                token=self.zero_token,
                pick=["gigboard"],
                caller_name=self.caller_name
            ).fetch()
            logger.info("Successfully fetched secrets from Zero")
        except Exception as e:
            logger.error(f"Failed to fetch secrets from Zero: {e}")
            self._secrets = {}

    def _normalize_key(self, key: str) -> str:
        """Normalize a key to lowercase and replace underscores with hyphens."""
        return key.lower().replace("_", "-")

    def get_secret(self, key: str) -> Optional[str]:
        """
        Get a secret value by key.

        Args:
            key: The secret key to retrieve

        Returns:
            Secret value or None if not found
        """
        env_value = os.getenv(key)
        if env_value is not None:
            return env_value

        normalized = self._normalize_key(key)
        if normalized in self._cache:
            return self._cache[normalized]

        self._fetch_secrets()
        secret_value = self._secrets.get("gigboard", {}).get(normalized)

        if secret_value:
            self._cache[normalized] = secret_value

        return secret_value

    def clear(self):
        """Drop cached values so the next lookup refetches."""
        self._cache.clear()
        self._secrets = None


class GigboardConfig:
    """
    Gigboard Service configuration manager.
    Handles all configuration for the service.
    """

    def __init__(self):
        self.secrets_manager = ZeroSecretsManager(os.getenv("ZERO_TOKEN"))

    def _get_bool(self, key: str, default: bool = False) -> bool:
        value = self.secrets_manager.get_secret(key)
        if value is None:
            return default
        return str(value).strip().lower() in ("1", "true", "yes", "on")

    def get_database_url(self) -> str:
        """Get the database connection URL."""
        url = self.secrets_manager.get_secret("DATABASE_URL")
        if url:
            return url

        host = self.secrets_manager.get_secret("DB_HOST")
        if not host:
            return "sqlite:///./gigboard.db"
        port = self.secrets_manager.get_secret("DB_PORT") or "5432"
        name = self.secrets_manager.get_secret("DB_NAME") or "gigboard"
        user = self.secrets_manager.get_secret("DB_USER") or "gigboard"
        password = self.secrets_manager.get_secret("DB_PASSWORD") or "gigboard"

        return f"postgresql://{user}:{quote_plus(password)}@{host}:{port}/{name}"

    def get_redis_url(self) -> str:
        """Get the Redis connection URL."""
        url = self.secrets_manager.get_secret("REDIS_URL")
        if url:
            return url

        host = self.secrets_manager.get_secret("REDIS_HOST") or "localhost"
        port = self.secrets_manager.get_secret("REDIS_PORT") or "6379"
        password = self.secrets_manager.get_secret("REDIS_PASSWORD")
        use_tls = self._get_bool("REDIS_USE_TLS")

        protocol = "rediss://" if use_tls else "redis://"

        if password:
            return f"{protocol}:{quote_plus(password)}@{host}:{port}"
        return f"{protocol}{host}:{port}"

    def is_redis_enabled(self) -> bool:
        """Domain events are only published when Redis is enabled."""
        return self._get_bool("REDIS_ENABLED", True)

    def get_jwt_secret(self) -> str:
        """Get JWT secret key."""
        return self.secrets_manager.get_secret("JWT_SECRET") or "your-secret-key-change-in-production"

    def get_jwt_algorithm(self) -> str:
        """Get JWT algorithm."""
        return self.secrets_manager.get_secret("JWT_ALGORITHM") or "HS256"

    def get_cors_origins(self) -> List[str]:
        """Get CORS allowed origins."""
        origins = self.secrets_manager.get_secret("CORS_ORIGINS")
        if origins:
            return [origin.strip() for origin in origins.split(",")]
        return ["http://localhost:8081", "http://localhost:19006"]

    def get_log_level(self) -> str:
        return self.secrets_manager.get_secret("LOG_LEVEL") or "INFO"

    def get_marketplace_config(self) -> Dict[str, Any]:
        """
        Get marketplace policy settings.

        Returns:
            allow_over_capacity: approve applications past required_people
            message_edit_window_hours: how long a sender may edit a message
        """
        return {
            "allow_over_capacity": self._get_bool("ALLOW_OVER_CAPACITY", False),
            "message_edit_window_hours": int(
                self.secrets_manager.get_secret("MESSAGE_EDIT_WINDOW_HOURS") or "24"
            ),
        }


# Global config instance
config = GigboardConfig()
