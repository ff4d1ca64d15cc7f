"""
Unit tests for the environment configuration provider.
"""

import logging
import os
from unittest.mock import patch

import pytest

from multisession.config.provider import EnvConfigProvider
from multisession.logging_config import AccessLogFilter, get_logging_config
from multisession.modules.session import Options


def test_session_defaults():
    with patch.dict(os.environ, {}, clear=True):
        config = EnvConfigProvider().get_session_config()

    assert config.name == "session"
    assert config.fail_on_error is False
    assert config.options() == Options.defaults()


def test_session_from_env():
    env = {
        "SESSION_NAME": "sid",
        "SESSION_COOKIE_PATH": "/app",
        "SESSION_COOKIE_DOMAIN": "example.com",
        "SESSION_MAX_AGE": "-1",
        "SESSION_SECURE": "true",
        "SESSION_HTTP_ONLY": "false",
        "SESSION_FAIL_ON_ERROR": "TRUE",
    }
    with patch.dict(os.environ, env, clear=True):
        config = EnvConfigProvider().get_session_config()

    assert config.name == "sid"
    assert config.fail_on_error is True
    assert config.options() == Options(
        path="/app", domain="example.com", max_age=-1, secure=True, http_only=False
    )


def test_storage_config():
    env = {"SESSION_BACKEND": "Redis", "REDIS_URL": "redis://cache:6379/2", "SESSION_TTL": "60"}
    with patch.dict(os.environ, env, clear=True):
        config = EnvConfigProvider().get_storage_config()

    assert config.uses_redis is True
    assert config.redis_url == "redis://cache:6379/2"
    assert config.key_prefix == "session:"
    assert config.ttl == 60


def test_unknown_backend_rejected():
    with patch.dict(os.environ, {"SESSION_BACKEND": "memcached"}, clear=True):
        with pytest.raises(ValueError) as exc_info:
            EnvConfigProvider().get_storage_config()
    assert "memcached" in str(exc_info.value)


def test_api_config():
    with patch.dict(os.environ, {"API_PORT": "9000", "LOG_LEVEL": "debug"}, clear=True):
        config = EnvConfigProvider().get_api_config()

    assert config.port == 9000
    assert config.host == "0.0.0.0"
    assert config.log_level == "DEBUG"


def test_logging_config_level():
    config = get_logging_config("DEBUG")
    assert config["loggers"]["multisession"]["level"] == "DEBUG"
    assert config["root"]["level"] == "DEBUG"


def test_access_log_filter_defaults_to_health():
    health_filter = AccessLogFilter()
    health = logging.LogRecord("uvicorn.access", logging.INFO, "", 0, '"GET /health HTTP/1.1" 200', None, None)
    other = logging.LogRecord("uvicorn.access", logging.INFO, "", 0, '"GET /session HTTP/1.1" 200', None, None)

    assert health_filter.filter(health) is False
    assert health_filter.filter(other) is True


def test_access_log_filter_custom_paths():
    quiet = AccessLogFilter(paths=["/ready", "/metrics"])

    def access(line):
        return logging.LogRecord("uvicorn.access", logging.INFO, "", 0, line, None, None)

    assert quiet.filter(access('"GET /ready HTTP/1.1" 200')) is False
    assert quiet.filter(access('"GET /metrics?format=text HTTP/1.1" 200')) is False
    assert quiet.filter(access('"GET /health HTTP/1.1" 200')) is True
    assert quiet.filter(access('"GET /readyz HTTP/1.1" 200')) is True
    assert quiet.filter(access('"POST /ready HTTP/1.1" 200')) is True


def test_logging_config_quiet_paths():
    config = get_logging_config("INFO", quiet_paths=["/ready"])

    assert config["filters"]["quiet_paths"]["paths"] == ("/ready",)
    assert "uvicorn.error" not in config["loggers"]


def test_api_config_quiet_paths():
    with patch.dict(os.environ, {"LOG_QUIET_PATHS": "/health, /ready,"}, clear=True):
        config = EnvConfigProvider().get_api_config()

    assert config.quiet_paths == ("/health", "/ready")
