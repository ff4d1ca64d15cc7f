"""
Session Middleware Module - Black Box Interface

Purpose: Attach sessions to each request and save them when it finishes
Interface: SessionMiddleware, create_session_middleware(), get_session(), session_dependency()
Hidden: Request context creation, teardown ordering, cookie writing

Several middlewares with different names and stores can share one request;
the outermost one owns the request context and runs the final save.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from multisession.modules.cookies import apply_cookie
from multisession.modules.errors import SessionSetupError
from multisession.modules.registry import RequestContext, get_registry
from multisession.modules.session import Options, Session
from multisession.modules.storage import Store

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


class SessionMiddleware:
    """
    Maps a named session into the FastAPI handler chain.

    Register with:

        session_middleware = SessionMiddleware(store, "session")

        @app.middleware("http")
        async def add_session(request: Request, call_next):
            return await session_middleware(request, call_next)
    """

    def __init__(
        self,
        store: Store,
        name: str,
        options: Optional[Options] = None,
        fail_on_error: bool = False,
        log_attempts: bool = True,
    ):
        """
        Initialize session middleware.

        Args:
            store: Store that creates and persists the session
            name: Session name (also the cookie name for cookie-referenced stores)
            options: Options for sessions the store returns without any
            fail_on_error: Answer 500 when the session cannot be created or saved
            log_attempts: Whether to log per-request session activity
        """
        self.store = store
        self.name = name
        self.options = options or Options.defaults()
        self.fail_on_error = fail_on_error
        self.log_attempts = log_attempts

    def format_error(self, status_code: int, message: str) -> Dict[str, Any]:
        """Format error response body."""
        return {"error": message, "status": status_code}

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        """Process the request through the session middleware."""
        context = getattr(request.state, "session_context", None)
        owns_context = context is None
        if owns_context:
            context = RequestContext(request=request)
            request.state.session_context = context

        session, error = await get_registry(context).get(self.store, self.name)
        if error is not None:
            logger.error(f"Error creating session {self.name!r}: {error}")
            if self.fail_on_error:
                return JSONResponse(
                    status_code=500,
                    content=self.format_error(500, f"Session {self.name!r} unavailable"),
                )

        if session.options is None:
            session.options = self.options.copy()
        context.session = session

        if self.log_attempts:
            logger.debug(f"Session {self.name!r} attached to {request.method} {request.url.path}")

        response = await call_next(request)

        if owns_context:
            response = await self._teardown(context, response)
        return response

    async def _teardown(self, context: RequestContext, response: Response) -> Response:
        """Save dirty sessions once, after the handler chain completed."""
        errors = await get_registry(context).flush(context)
        if errors is not None:
            logger.error(f"Error saving sessions: {errors}")
            if self.fail_on_error:
                response = JSONResponse(
                    status_code=500,
                    content=self.format_error(500, "Failed to save session"),
                )

        # Sessions that did save still need their cookies.
        for cookie in context.cookies:
            apply_cookie(response, cookie)
        return response


def create_session_middleware(
    store: Store,
    name: str,
    options: Optional[Options] = None,
    fail_on_error: bool = False,
) -> SessionMiddleware:
    """
    Factory function to create session middleware.

    Args:
        store: Session store
        name: Session name
        options: Default session options
        fail_on_error: Answer 500 on session errors instead of logging them

    Returns:
        Configured SessionMiddleware instance
    """
    return SessionMiddleware(
        store=store,
        name=name,
        options=options,
        fail_on_error=fail_on_error,
    )


def get_request_context(request: Request) -> RequestContext:
    """
    Return the session context of the current request.

    Raises:
        SessionSetupError: If no session middleware handled the request
    """
    context = getattr(request.state, "session_context", None)
    if context is None:
        raise SessionSetupError("session middleware is not installed")
    return context


async def get_session(request: Request) -> Session:
    """FastAPI dependency returning the session attached by the middleware."""
    try:
        context = get_request_context(request)
    except SessionSetupError as e:
        raise HTTPException(500, str(e))
    if context.session is None:
        raise HTTPException(500, "No session attached to request")
    return context.session


def session_dependency(name: str) -> Callable[[Request], Awaitable[Session]]:
    """Build a FastAPI dependency returning the session registered under name."""

    async def dependency(request: Request) -> Session:
        try:
            context = get_request_context(request)
        except SessionSetupError as e:
            raise HTTPException(500, str(e))
        session = get_registry(context).lookup(name)
        if session is None:
            raise HTTPException(500, f"Session {name!r} is not registered")
        return session

    return dependency


__all__ = [
    "SessionMiddleware",
    "create_session_middleware",
    "get_request_context",
    "get_session",
    "session_dependency",
]
