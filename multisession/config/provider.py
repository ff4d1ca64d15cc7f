"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from multisession.modules.session import Options

BACKENDS = ("memory", "redis")


@dataclass
class SessionConfig:
    """Session cookie configuration."""
    name: str
    path: str
    domain: Optional[str]
    max_age: int
    secure: bool
    http_only: bool
    fail_on_error: bool

    def options(self) -> Options:
        """Build session options from this configuration."""
        return Options(
            path=self.path,
            domain=self.domain,
            max_age=self.max_age,
            secure=self.secure,
            http_only=self.http_only,
        )


@dataclass
class StorageConfig:
    """Session storage configuration."""
    backend: str
    redis_url: str
    key_prefix: str
    ttl: int

    @property
    def uses_redis(self) -> bool:
        return self.backend == "redis"


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    log_level: str
    quiet_paths: Tuple[str, ...] = ("/health",)


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration."""
        ...

    def get_storage_config(self) -> StorageConfig:
        """Get storage configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration from environment variables."""
        return SessionConfig(
            name=os.getenv("SESSION_NAME", "session"),
            path=os.getenv("SESSION_COOKIE_PATH", "/"),
            domain=os.getenv("SESSION_COOKIE_DOMAIN") or None,
            max_age=int(os.getenv("SESSION_MAX_AGE", "3600")),
            secure=_env_bool("SESSION_SECURE", "false"),
            http_only=_env_bool("SESSION_HTTP_ONLY", "true"),
            fail_on_error=_env_bool("SESSION_FAIL_ON_ERROR", "false"),
        )

    def get_storage_config(self) -> StorageConfig:
        """Get storage configuration from environment variables."""
        backend = os.getenv("SESSION_BACKEND", "memory").lower()
        if backend not in BACKENDS:
            raise ValueError(
                f"Unsupported SESSION_BACKEND {backend!r}. "
                f"Expected one of: {', '.join(BACKENDS)}"
            )

        return StorageConfig(
            backend=backend,
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            key_prefix=os.getenv("SESSION_KEY_PREFIX", "session:"),
            ttl=int(os.getenv("SESSION_TTL", "86400")),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            quiet_paths=tuple(
                path.strip() for path in os.getenv("LOG_QUIET_PATHS", "/health").split(",") if path.strip()
            ),
        )
