#!/usr/bin/env python3
"""
multisession - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Builds the session store
3. Runs a small session API behind the session middleware

All session logic is in the modules, following black box principles.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from multisession.config.provider import ConfigProvider, EnvConfigProvider
from multisession.logging_config import get_logging_config, setup_logging
from multisession.modules.middleware import SessionMiddleware, get_session
from multisession.modules.session import FLASHES_KEY, Session
from multisession.modules.storage import InMemoryStore, RedisStore, StorageModule, Store

logger = logging.getLogger(__name__)


# API Models


class SetValueRequest(BaseModel):
    """Request to store a session value."""

    value: Any = Field(..., description="JSON value to store")


class FlashRequest(BaseModel):
    """Request to queue a flash message."""

    message: str = Field(..., min_length=1, description="Flash message")
    key: str = Field(default=FLASHES_KEY, description="Flash key")


class SessionResponse(BaseModel):
    """Current session state."""

    name: str
    session_id: Optional[str] = None
    is_new: bool
    values: Dict[str, Any]


def create_store(config_provider: ConfigProvider) -> Tuple[Store, Optional[StorageModule]]:
    """
    Build the session store described by configuration.

    Returns:
        Tuple of (store, storage module owning the Redis connection or None)
    """
    session_config = config_provider.get_session_config()
    storage_config = config_provider.get_storage_config()

    if storage_config.uses_redis:
        storage = StorageModule(storage_config.redis_url)
        store = RedisStore(
            storage.connect(),
            key_prefix=storage_config.key_prefix,
            options=session_config.options(),
            default_ttl=storage_config.ttl,
        )
        logger.info("Using Redis session store")
        return store, storage

    logger.info("Using in-memory session store")
    return InMemoryStore(options=session_config.options(), default_ttl=storage_config.ttl), None


def create_app(
    store: Optional[Store] = None,
    config_provider: Optional[ConfigProvider] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        store: Session store (built from configuration when omitted)
        config_provider: Configuration provider (environment by default)
    """
    config_provider = config_provider or EnvConfigProvider()
    session_config = config_provider.get_session_config()

    storage: Optional[StorageModule] = None
    if store is None:
        store, storage = create_store(config_provider)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting multisession API...")
        yield
        logger.info("Shutting down multisession API...")
        if storage:
            await storage.disconnect()

    app = FastAPI(
        title="multisession API",
        description="Per-request session registry",
        version="1.0.0",
        lifespan=lifespan,
    )

    session_middleware = SessionMiddleware(
        store=store,
        name=session_config.name,
        options=session_config.options(),
        fail_on_error=session_config.fail_on_error,
    )

    @app.middleware("http")
    async def add_session(request: Request, call_next):
        return await session_middleware(request, call_next)

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "multisession"}

    @app.get("/session", response_model=SessionResponse)
    async def read_session(session: Session = Depends(get_session)):
        return SessionResponse(
            name=session.name,
            session_id=session.id,
            is_new=session.is_new,
            values={str(k): v for k, v in session.values.items()},
        )

    @app.put("/session/{key}")
    async def set_value(key: str, body: SetValueRequest, session: Session = Depends(get_session)):
        if key == FLASHES_KEY:
            raise HTTPException(400, f"{FLASHES_KEY!r} is reserved for flash messages")
        session.set(key, body.value)
        return {"key": key, "value": body.value}

    @app.delete("/session/{key}", status_code=204)
    async def delete_value(key: str, session: Session = Depends(get_session)):
        session.delete(key)

    @app.post("/session/flashes", status_code=201)
    async def add_flash(body: FlashRequest, session: Session = Depends(get_session)):
        session.add_flash(body.message, body.key)
        return {"key": body.key}

    @app.get("/session/flashes")
    async def read_flashes(key: str = FLASHES_KEY, session: Session = Depends(get_session)):
        flashes: List[Any] = session.flashes(key)
        return {"key": key, "flashes": flashes}

    return app


def main() -> None:
    """Run the API server."""
    config_provider = EnvConfigProvider()
    api_config = config_provider.get_api_config()
    setup_logging(api_config.log_level, api_config.quiet_paths)

    uvicorn.run(
        create_app(config_provider=config_provider),
        host=api_config.host,
        port=api_config.port,
        log_config=get_logging_config(api_config.log_level, api_config.quiet_paths),
    )


if __name__ == "__main__":
    main()
