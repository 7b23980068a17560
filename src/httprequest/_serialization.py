"""Body serialization and response decoding.

Request bodies and response payloads go through pydantic: models and plain
JSON-compatible values are written with :func:`pydantic_core.to_json`, and
responses are validated into the declared target type with a
:class:`pydantic.TypeAdapter`. Errors raised by pydantic are never wrapped.

Recognized keys of the options mapping:

- ``by_alias`` (bool, default True): serialize fields by alias.
- ``exclude_none`` (bool, default False): drop ``None`` fields when serializing.
- ``strict`` (bool): strict validation when decoding.
- ``context`` (any): validation context handed to pydantic validators.
- ``encoding`` (str, default utf-8): text encoding for ``str`` targets.
"""

from functools import lru_cache
from typing import Any, Mapping, Optional, Protocol

from pydantic import BaseModel, TypeAdapter
from pydantic_core import to_json

from ._utils.constants import CONTENT_TYPE_JSON


class ResponseDecoder(Protocol):
    def decode(self, data: bytes, target: Any, options: Mapping[str, Any]) -> Any: ...


class PydanticDecoder:
    """Decode raw bytes into ``target``.

    ``bytes`` and ``str`` targets get the raw payload and its text, a ``None``
    target discards the body, anything else is validated as JSON.
    """

    def decode(self, data: bytes, target: Any, options: Mapping[str, Any]) -> Any:
        if target is None or target is type(None):
            return None
        if target is bytes:
            return bytes(data)
        if target is str:
            return bytes(data).decode(options.get("encoding", "utf-8"))

        return _adapter_for(target).validate_json(
            data,
            strict=options.get("strict"),
            context=options.get("context"),
        )


def encode_body(body: Any, options: Mapping[str, Any]) -> tuple[bytes, Optional[str]]:
    """Serialize a request body, returning the bytes and an implied content type."""
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body), None
    if isinstance(body, str):
        return body.encode("utf-8"), None

    by_alias = bool(options.get("by_alias", True))
    exclude_none = bool(options.get("exclude_none", False))
    if isinstance(body, BaseModel):
        data = body.model_dump_json(by_alias=by_alias, exclude_none=exclude_none)
        return data.encode("utf-8"), CONTENT_TYPE_JSON
    return to_json(body, by_alias=by_alias, exclude_none=exclude_none), CONTENT_TYPE_JSON


def _adapter_for(target: Any) -> TypeAdapter:
    try:
        return _cached_adapter(target)
    except TypeError:
        # unhashable annotation
        return TypeAdapter(target)


@lru_cache(maxsize=128)
def _cached_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)
