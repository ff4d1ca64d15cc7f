import logging
import uuid
from typing import Optional, Protocol, Tuple, Union

from multisession.modules.cookies import new_cookie
from multisession.modules.errors import SerializationError
from multisession.modules.registry import RequestContext
from multisession.modules.session import Options, Session, new_session

from .serializer import SessionSerializer

logger = logging.getLogger(__name__)

Payload = Union[str, bytes]


class Store(Protocol):
    """Protocol for session stores - allows swappable backends."""

    async def new(self, context: RequestContext, name: str) -> Tuple[Session, Optional[Exception]]:
        """
        Create or load the session registered under name.

        Returns a usable session even when an error is reported alongside it.

        Returns:
            Tuple of (session, error or None)
        """
        ...

    async def save(self, context: RequestContext, session: Session) -> None:
        """Persist the session; raise on failure."""
        ...


class BaseStore:
    """
    Server-side store referenced by a cookie holding the session ID.

    Subclasses provide the backend through _load(), _write() and _delete().
    """

    def __init__(
        self,
        options: Optional[Options] = None,
        serializer: Optional[SessionSerializer] = None,
        default_ttl: int = 86400,
    ):
        """
        Initialize store.

        Args:
            options: Default options copied onto every new session
            serializer: Serializer for session values
            default_ttl: Backend TTL in seconds when options.max_age is 0
        """
        self.options = options or Options.defaults()
        self.serializer = serializer or SessionSerializer()
        self.default_ttl = default_ttl

    async def new(self, context: RequestContext, name: str) -> Tuple[Session, Optional[Exception]]:
        session = new_session(self, name)
        session.options = self.options.copy()
        session.is_new = True

        session_id = self._read_cookie(context, name)
        if not session_id:
            return session, None

        try:
            payload = await self._load(session_id)
        except Exception as e:
            logger.warning(f"Failed to load session {name!r}: {e}")
            return session, e

        if payload is None:
            return session, None

        try:
            session.values = self.serializer.loads(payload)
        except SerializationError as e:
            logger.warning(f"Discarding unreadable session {name!r}: {e}")
            return session, e

        session.id = session_id
        session.is_new = False
        return session, None

    async def save(self, context: RequestContext, session: Session) -> None:
        options = session.options or self.options

        if options.max_age < 0:
            if session.id:
                await self._delete(session.id)
                session.id = None
            context.set_cookie(new_cookie(session.name, "", options))
            return

        if not session.id:
            session.id = uuid.uuid4().hex

        payload = self.serializer.dumps(session.values)
        ttl = options.max_age if options.max_age > 0 else self.default_ttl
        await self._write(session.id, payload, ttl)
        context.set_cookie(new_cookie(session.name, session.id, options))

    @staticmethod
    def _read_cookie(context: RequestContext, name: str) -> Optional[str]:
        if context.request is None:
            return None
        return context.request.cookies.get(name)

    async def _load(self, session_id: str) -> Optional[Payload]:
        raise NotImplementedError

    async def _write(self, session_id: str, payload: str, ttl: int) -> None:
        raise NotImplementedError

    async def _delete(self, session_id: str) -> None:
        raise NotImplementedError
