"""Tests for environment-driven settings."""

import os
from unittest.mock import patch

from core.config import check_required_env_vars, get_allowed_origins, get_api_base_url


class TestRequiredEnvVars:
    def test_all_set(self):
        env = {"DATABASE_URL": "postgresql://db/x", "JWT_SECRET": "s", "SENTRY_DSN": "https://dsn"}
        with patch.dict(os.environ, env, clear=True):
            assert check_required_env_vars() == (True, [])

    def test_production_fails_without_required_vars(self):
        with patch.dict(os.environ, {"APP_ENV": "production"}, clear=True):
            ok, _ = check_required_env_vars()
        assert not ok

    def test_dev_mode_only_warns_for_required_vars(self):
        with patch.dict(os.environ, {"DEV_MODE": "true"}, clear=True):
            ok, warnings = check_required_env_vars()
        assert ok
        assert len(warnings) == 2
        assert not any("SENTRY_DSN" in w for w in warnings)


class TestUrls:
    def test_allowed_origins_include_frontend_url(self):
        env = {"APP_ENV": "production", "FRONTEND_URL": "https://admin.example.com"}
        with patch.dict(os.environ, env, clear=True):
            origins = get_allowed_origins()
        assert "https://admin.example.com" in origins
        assert "http://localhost:5173" in origins

    def test_api_base_url_strips_trailing_slash(self):
        with patch.dict(os.environ, {"API_BASE_URL": "https://api.example.com/"}, clear=True):
            assert get_api_base_url() == "https://api.example.com"
        with patch.dict(os.environ, {}, clear=True):
            assert get_api_base_url() == "http://localhost:8000"
