import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from starlette.requests import Request

from multisession.modules.cookies import SessionCookie
from multisession.modules.errors import MissingStoreError, MultiError, SessionSaveError
from multisession.modules.session import Session, new_session

if TYPE_CHECKING:
    from multisession.modules.storage import Store

logger = logging.getLogger(__name__)


@dataclass
class RequestContext:
    """
    Request-scoped state shared by the session middleware, handlers and stores.

    One instance exists per request. Stores receive it unchanged and may
    queue cookies on it; the middleware writes them onto the response.
    """

    request: Optional[Request] = None
    registry: Optional["Registry"] = None
    session: Optional[Session] = None
    cookies: List[SessionCookie] = field(default_factory=list)

    def set_cookie(self, cookie: SessionCookie) -> None:
        """Queue a cookie for the response; a later cookie replaces an earlier one of the same name."""
        self.cookies = [c for c in self.cookies if c.name != cookie.name]
        self.cookies.append(cookie)


@dataclass
class _SessionInfo:
    session: Session
    error: Optional[Exception] = None


class Registry:
    """Sessions used during a request."""

    def __init__(self, context: RequestContext):
        self.context = context
        self._sessions: Dict[str, _SessionInfo] = {}

    async def get(self, store: "Store", name: str) -> Tuple[Session, Optional[Exception]]:
        """
        Register and return a session for the given name and store.

        The store is asked for a session only the first time a name is seen;
        later calls return the same instance and the same creation error.
        The store is rebound on every call so a caller can redirect
        persistence of an already tracked session.

        Args:
            store: Store used to create and persist the session
            name: Session name

        Returns:
            Tuple of (session, creation error or None)
        """
        info = self._sessions.get(name)
        if info is None:
            try:
                session, error = await store.new(self.context, name)
            except Exception as e:
                logger.warning(f"Store failed to create session {name!r}: {e}")
                session, error = new_session(store, name), e
            session._bind(store, name)
            info = _SessionInfo(session=session, error=error)
            self._sessions[name] = info
        else:
            info.session._bind(store)
        return info.session, info.error

    def lookup(self, name: str) -> Optional[Session]:
        """Return the tracked session for name without touching any store."""
        info = self._sessions.get(name)
        return info.session if info else None

    @property
    def names(self) -> List[str]:
        return list(self._sessions)

    def __contains__(self, name: str) -> bool:
        return name in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    async def save(self, context: RequestContext) -> Optional[MultiError]:
        """
        Save all sessions registered for the current request.

        Every session gets a save attempt; one failing store does not stop
        the others.

        Returns:
            MultiError with one entry per failed session, or None
        """
        return await self._save_sessions(context, list(self._sessions.items()))

    async def flush(self, context: RequestContext) -> Optional[MultiError]:
        """Save only the sessions mutated during this request."""
        dirty = [(name, info) for name, info in self._sessions.items() if info.session.dirty]
        return await self._save_sessions(context, dirty)

    async def _save_sessions(
        self, context: RequestContext, entries: List[Tuple[str, _SessionInfo]]
    ) -> Optional[MultiError]:
        errors = MultiError()
        for name, info in entries:
            session = info.session
            if session.store is None:
                errors.append(MissingStoreError(name))
                continue
            try:
                await session.store.save(context, session)
            except Exception as e:
                error = SessionSaveError(name, e)
                error.__cause__ = e
                errors.append(error)
            else:
                logger.debug(f"Saved session {name!r}")

        if len(errors):
            return errors
        return None


def get_registry(context: RequestContext) -> Registry:
    """Return the registry for the current request, creating it on first use."""
    if context.registry is None:
        context.registry = Registry(context)
    return context.registry


async def save(context: RequestContext) -> Optional[MultiError]:
    """Save all sessions used during the current request."""
    return await get_registry(context).save(context)
