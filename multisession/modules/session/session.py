from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, Hashable, List, Optional

from multisession.modules.errors import MissingStoreError

if TYPE_CHECKING:
    from multisession.modules.registry import RequestContext
    from multisession.modules.storage import Store

# Default flashes key.
FLASHES_KEY = "_flash"


@dataclass
class Options:
    """
    Cookie configuration for a session or session store.

    max_age semantics:
    - 0: no Max-Age attribute
    - < 0: delete the cookie now (Max-Age: 0)
    - > 0: Max-Age in seconds
    """

    path: str = "/"
    domain: Optional[str] = None
    max_age: int = 0
    secure: bool = False
    http_only: bool = False

    @classmethod
    def defaults(cls) -> "Options":
        """Options applied by the middleware when none are given."""
        return cls(path="/", max_age=3600, secure=False, http_only=True)

    def copy(self) -> "Options":
        return replace(self)


class Session:
    """
    Values and optional configuration for one named session.

    A session belongs to exactly one registry entry per request. Every
    mutating call marks it dirty; the flag is never reset while the request
    is being handled.
    """

    def __init__(self, store: Optional["Store"], name: str):
        self.id: Optional[str] = None
        self.values: Dict[Hashable, Any] = {}
        self.options: Optional[Options] = None
        self.is_new: bool = False
        self._store = store
        self._name = name
        self._dirty = False

    @property
    def name(self) -> str:
        """Name used to register the session."""
        return self._name

    @property
    def store(self) -> Optional["Store"]:
        """Store the session is persisted with."""
        return self._store

    @property
    def dirty(self) -> bool:
        return self._dirty

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set(self, key: Hashable, value: Any) -> None:
        self.values[key] = value
        self._dirty = True

    def delete(self, key: Hashable) -> None:
        self.values.pop(key, None)
        self._dirty = True

    def clear(self) -> None:
        """Delete all values in the session."""
        self.values.clear()
        self._dirty = True

    def add_flash(self, value: Any, key: str = FLASHES_KEY) -> None:
        """
        Add a flash message to the session.

        Args:
            value: Message to append
            key: Flash key, "_flash" by default
        """
        flashes = self.values.get(key)
        if not isinstance(flashes, list):
            # Anything else stored under the key is replaced.
            flashes = []
            self.values[key] = flashes
        flashes.append(value)
        self._dirty = True

    def flashes(self, key: str = FLASHES_KEY) -> List[Any]:
        """
        Return the flash messages stored under key and drop them.

        A second call in the same request returns an empty list. Consuming
        messages counts as a mutation so the session gets saved.

        Args:
            key: Flash key, "_flash" by default

        Returns:
            Flash messages in insertion order
        """
        flashes = self.values.pop(key, None)
        if flashes is None or (isinstance(flashes, list) and not flashes):
            return []
        self._dirty = True
        if not isinstance(flashes, list):
            return [flashes]
        return list(flashes)

    async def save(self, context: "RequestContext") -> None:
        """Save this session; same as calling store.save(context, session)."""
        if self._store is None:
            raise MissingStoreError(self._name)
        await self._store.save(context, self)

    def _bind(self, store: Optional["Store"], name: Optional[str] = None) -> None:
        # The registry passes name only when it first tracks the session.
        if name is not None:
            self._name = name
        self._store = store

    def __repr__(self) -> str:
        return (
            f"Session(name={self._name!r}, id={self.id!r}, "
            f"is_new={self.is_new}, dirty={self._dirty})"
        )


def new_session(store: Optional["Store"], name: str) -> Session:
    """Called by session stores to create a new session instance."""
    return Session(store, name)
