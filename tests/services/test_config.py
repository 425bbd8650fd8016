"""
Tests for configuration lookup.
"""

from unittest.mock import MagicMock, patch

from gigboard.core.config import GigboardConfig, ZeroSecretsManager


class TestZeroSecretsManager:

    def test_env_wins_over_zero(self, monkeypatch):
        monkeypatch.setenv("JWT_ALGORITHM", "HS384")
        with patch("gigboard.core.config.zero") as mock_zero:
            manager = ZeroSecretsManager("token")
            assert manager.get_secret("JWT_ALGORITHM") == "HS384"
            mock_zero.assert_not_called()

    def test_fetches_once_and_caches(self, monkeypatch):
        monkeypatch.delenv("REDIS_HOST", raising=False)
        with patch("gigboard.core.config.zero") as mock_zero:
            mock_zero.return_value.fetch.return_value = {"gigboard": {"redis-host": "cache.internal"}}
            manager = ZeroSecretsManager("token")

            assert manager.get_secret("REDIS_HOST") == "cache.internal"
            assert manager.get_secret("REDIS_HOST") == "cache.internal"
            mock_zero.return_value.fetch.assert_called_once()

    def test_no_token_means_no_secrets(self, monkeypatch):
        monkeypatch.delenv("REDIS_HOST", raising=False)
        with patch("gigboard.core.config.zero") as mock_zero:
            assert ZeroSecretsManager(None).get_secret("REDIS_HOST") is None
            mock_zero.assert_not_called()

    def test_fetch_failure_is_tolerated(self, monkeypatch):
        monkeypatch.delenv("REDIS_HOST", raising=False)
        with patch("gigboard.core.config.zero") as mock_zero:
            mock_zero.return_value.fetch.side_effect = RuntimeError("unreachable")
            assert ZeroSecretsManager("token").get_secret("REDIS_HOST") is None


class TestGigboardConfig:

    def _config(self, secrets):
        config = GigboardConfig()
        config.secrets_manager = MagicMock()
        config.secrets_manager.get_secret.side_effect = lambda key: secrets.get(key)
        return config

    def test_database_url_from_parts(self):
        config = self._config({"DB_HOST": "db", "DB_PASSWORD": "p@ss"})
        assert config.get_database_url() == "postgresql://gigboard:p%40ss@db:5432/gigboard"

    def test_database_url_default(self):
        assert self._config({}).get_database_url() == "sqlite:///./gigboard.db"

    def test_redis_url(self):
        assert self._config({}).get_redis_url() == "redis://localhost:6379"
        assert self._config(
            {"REDIS_HOST": "r", "REDIS_PASSWORD": "pw", "REDIS_USE_TLS": "true"}
        ).get_redis_url() == "rediss://:pw@r:6379"

    def test_marketplace_defaults(self):
        assert self._config({}).get_marketplace_config() == {
            "allow_over_capacity": False,
            "message_edit_window_hours": 24,
        }

    def test_marketplace_overrides(self):
        config = self._config({"ALLOW_OVER_CAPACITY": "yes", "MESSAGE_EDIT_WINDOW_HOURS": "2"})
        assert config.get_marketplace_config() == {
            "allow_over_capacity": True,
            "message_edit_window_hours": 2,
        }

    def test_cors_origins_split(self):
        config = self._config({"CORS_ORIGINS": "https://a.example, https://b.example"})
        assert config.get_cors_origins() == ["https://a.example", "https://b.example"]
