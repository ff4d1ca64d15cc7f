"""
Session value serialization.

Stores only persist types they were told about ahead of time: JSON natives,
tuples, dicts with arbitrary hashable keys, and whatever was passed to
SessionSerializer.register().
"""

import dataclasses
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, Optional, Union

from pydantic import BaseModel

from multisession.modules.errors import SerializationError

TYPE_TAG = "__type__"
TUPLE_TAG = "__tuple__"
DICT_TAG = "__dict__"


@dataclass
class _Registration:
    name: str
    cls: type
    encode: Callable[[Any], Any]
    decode: Callable[[Any], Any]


class SessionSerializer:
    """JSON serializer for session values with explicit type registration."""

    def __init__(self):
        self._by_name: Dict[str, _Registration] = {}
        self._by_type: Dict[type, _Registration] = {}
        self.register(
            datetime,
            name="datetime",
            encode=lambda value: value.isoformat(),
            decode=datetime.fromisoformat,
        )

    def register(
        self,
        cls: type,
        name: Optional[str] = None,
        encode: Optional[Callable[[Any], Any]] = None,
        decode: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        """
        Register a concrete type that may appear as a session value.

        Pydantic models and dataclasses get default encoders; any other type
        needs both encode and decode.

        Args:
            cls: Type to register
            name: Tag written to the payload (defaults to module.qualname)
            encode: Callable turning an instance into JSON-native data
            decode: Callable rebuilding an instance from that data

        Raises:
            ValueError: If no encoder/decoder is available for cls
        """
        if encode is None or decode is None:
            if isinstance(cls, type) and issubclass(cls, BaseModel):
                encode = encode or (lambda value: value.model_dump(mode="json"))
                decode = decode or cls.model_validate
            elif dataclasses.is_dataclass(cls):
                encode = encode or dataclasses.asdict
                decode = decode or (lambda data: cls(**data))
            else:
                raise ValueError(f"encode and decode are required to register {cls!r}")

        registration = _Registration(
            name=name or f"{cls.__module__}.{cls.__qualname__}",
            cls=cls,
            encode=encode,
            decode=decode,
        )
        self._by_name[registration.name] = registration
        self._by_type[cls] = registration

    def is_registered(self, cls: type) -> bool:
        return cls in self._by_type

    def dumps(self, values: Dict[Hashable, Any]) -> str:
        """Encode a session's values to a JSON string."""
        pairs = [[self._encode(k), self._encode(v)] for k, v in values.items()]
        try:
            return json.dumps({"values": pairs}, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"cannot encode session values: {e}") from e

    def loads(self, payload: Union[str, bytes, bytearray]) -> Dict[Hashable, Any]:
        """Decode values previously produced by dumps()."""
        if isinstance(payload, (bytes, bytearray)):
            payload = payload.decode("utf-8")
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise SerializationError(f"invalid session payload: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("values"), list):
            raise SerializationError("invalid session payload: missing values")
        try:
            return {self._decode(k): self._decode(v) for k, v in data["values"]}
        except SerializationError:
            raise
        except (TypeError, ValueError) as e:
            raise SerializationError(f"cannot decode session values: {e}") from e

    def _encode(self, value: Any) -> Any:
        registration = self._by_type.get(type(value))
        if registration is not None:
            return {TYPE_TAG: registration.name, "data": registration.encode(value)}
        if value is None or isinstance(value, (bool, int, float, str)):
            return value
        if isinstance(value, list):
            return [self._encode(v) for v in value]
        if isinstance(value, tuple):
            return {TUPLE_TAG: [self._encode(v) for v in value]}
        if isinstance(value, dict):
            return {DICT_TAG: [[self._encode(k), self._encode(v)] for k, v in value.items()]}
        raise SerializationError(
            f"type {type(value).__name__} is not registered for session storage"
        )

    def _decode(self, value: Any) -> Any:
        if isinstance(value, list):
            return [self._decode(v) for v in value]
        if not isinstance(value, dict):
            return value
        if TUPLE_TAG in value:
            return tuple(self._decode(v) for v in value[TUPLE_TAG])
        if DICT_TAG in value:
            return {self._decode(k): self._decode(v) for k, v in value[DICT_TAG]}
        if TYPE_TAG in value:
            registration = self._by_name.get(value[TYPE_TAG])
            if registration is None:
                raise SerializationError(f"unknown session value type {value[TYPE_TAG]!r}")
            return registration.decode(value["data"])
        raise SerializationError(f"unexpected object in session payload: {value!r}")
