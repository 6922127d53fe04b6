"""HTTP codec for the groundcover provider client.

Serializes request bodies (JSON or YAML), attaches the authentication headers,
issues the call through the configured httpx client and decodes the response.
Non-success statuses are turned into classified errors.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx
import yaml
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .classifier import classify_error
from .content_types import (
    JSON_CONTENT_TYPE,
    YAML_CONTENT_TYPE,
    dump_json,
    dump_yaml,
    is_json_content_type,
    is_yaml_content_type,
    load_yaml,
)
from .errors import (
    ApiError,
    ClientTimeoutError,
    ConfigurationError,
    RequestDetails,
    SerializationError,
    TransportError,
)
from .retry import CANCEL_EVENT_EXTENSION

API_KEY_HEADER = "X-Auth-ApiKey"
BACKEND_ID_HEADER = "X-Backend-Id"

_MAX_ERROR_SNIPPET = 100
_MAX_SAMPLE_DEPTH = 2
_MAX_SAMPLE_ITEMS = 5
_MAX_SAMPLE_STRING = 200
_adapter_cache: dict[Any, TypeAdapter[Any]] = {}


@dataclass(slots=True)
class RequestOptions:
    operation: str
    method: str
    path: str
    query: dict[str, Any] | None = None
    json_body: Any | None = None
    yaml_body: Any | None = None
    headers: dict[str, str] | None = None
    allow_statuses: Iterable[int] | None = None
    resource_id: str | None = None
    response_model: Any | None = None


def _model_name(model_type: Any) -> str:
    return getattr(model_type, "__name__", repr(model_type))


def _adapter_for(model_type: Any) -> TypeAdapter[Any]:
    try:
        adapter = _adapter_cache.get(model_type)
    except TypeError:
        return TypeAdapter(model_type)

    if adapter is None:
        adapter = TypeAdapter(model_type)
        _adapter_cache[model_type] = adapter
    return adapter


def _sample_payload(value: Any, depth: int = 0) -> Any:
    if depth > _MAX_SAMPLE_DEPTH:
        return "<trimmed>"

    if isinstance(value, dict):
        sampled: dict[str, Any] = {}
        for index, (key, nested) in enumerate(value.items()):
            if index >= _MAX_SAMPLE_ITEMS:
                sampled["..."] = "<trimmed>"
                break
            sampled[str(key)] = _sample_payload(nested, depth + 1)
        return sampled

    if isinstance(value, list):
        sampled_items = [_sample_payload(item, depth + 1) for item in value[:_MAX_SAMPLE_ITEMS]]
        if len(value) > _MAX_SAMPLE_ITEMS:
            sampled_items.append("<trimmed>")
        return sampled_items

    if isinstance(value, (str, bytes)):
        text = value.decode("utf-8", "replace") if isinstance(value, bytes) else value
        return text if len(text) <= _MAX_SAMPLE_STRING else f"{text[:_MAX_SAMPLE_STRING]}..."

    if isinstance(value, (int, float, bool)) or value is None:
        return value

    return repr(value)


def to_wire(payload: Any) -> Any:
    """Convert pydantic models (possibly nested in containers) into plain JSON data.

    Only fields that were explicitly set are emitted, so an absent optional
    field stays absent while an explicit ``None`` is sent as ``null``.
    """
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(payload, dict):
        return {key: to_wire(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [to_wire(item) for item in payload]
    return payload


def encode_body(options: RequestOptions) -> tuple[bytes | None, str | None]:
    if options.json_body is None and options.yaml_body is None:
        return None, None

    try:
        if options.yaml_body is not None:
            return dump_yaml(to_wire(options.yaml_body)).encode("utf-8"), YAML_CONTENT_TYPE
        return dump_json(to_wire(options.json_body)).encode("utf-8"), JSON_CONTENT_TYPE
    except (TypeError, ValueError, yaml.YAMLError, PydanticSerializationError) as error:
        body = options.yaml_body if options.yaml_body is not None else options.json_body
        raise SerializationError(
            operation=options.operation,
            boundary="request",
            model_name=_model_name(type(body)),
            errors=str(error),
            raw_sample=_sample_payload(body),
            resource_id=options.resource_id,
        ) from error


def auth_headers(api_key: str | None, backend_id: str | None) -> dict[str, str]:
    if not api_key or not api_key.strip():
        raise ConfigurationError(f"authentication header {API_KEY_HEADER} is missing: API key is not configured")
    if not backend_id or not backend_id.strip():
        raise ConfigurationError(f"authentication header {BACKEND_ID_HEADER} is missing: backend id is not configured")
    return {API_KEY_HEADER: api_key, BACKEND_ID_HEADER: backend_id}


def parse_response_body(response: httpx.Response, options: RequestOptions) -> Any:
    if not response.content:
        return None

    content_type = response.headers.get("content-type", "")
    try:
        if is_yaml_content_type(content_type):
            return load_yaml(response.text)
        if is_json_content_type(content_type):
            return response.json()
    except (json.JSONDecodeError, yaml.YAMLError) as error:
        raise SerializationError(
            operation=options.operation,
            boundary="response",
            model_name=_model_name(options.response_model) if options.response_model else content_type,
            errors=str(error),
            status_code=response.status_code,
            raw_sample=_sample_payload(response.text),
            resource_id=options.resource_id,
        ) from error
    return response.text


def extract_error_message(response: httpx.Response) -> str:
    """Compose ``status code N[: message]`` from an error response body."""
    status = response.status_code
    body = response.content
    if not body:
        return f"status code {status}"

    message = ""
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        parsed = None
    if isinstance(parsed, dict):
        for key in ("error", "message"):
            candidate = parsed.get(key)
            if isinstance(candidate, str) and candidate:
                message = candidate
                break

    if not message:
        message = body.decode("utf-8", "replace")
        if len(message) > _MAX_ERROR_SNIPPET:
            message = message[: _MAX_ERROR_SNIPPET - 3] + "..."

    return f"status code {status}: {message}"


def validate_status(response: httpx.Response, options: RequestOptions) -> None:
    if options.allow_statuses is not None and response.status_code in set(options.allow_statuses):
        return

    if 200 <= response.status_code < 300:
        return

    details = RequestDetails(
        operation=options.operation,
        method=options.method,
        path=options.path,
        status_code=response.status_code,
        response_body=_sample_payload(response.text),
        resource_id=options.resource_id,
    )
    raw = ApiError(extract_error_message(response), details=details)
    classified = classify_error(raw, options.operation, options.resource_id)
    raise classified from raw


def decode_response(response: httpx.Response, options: RequestOptions) -> Any:
    payload = parse_response_body(response, options)
    if options.response_model is None or payload is None:
        return payload

    adapter = _adapter_for(options.response_model)
    try:
        return adapter.validate_python(payload)
    except ValidationError as error:
        raise SerializationError(
            operation=options.operation,
            boundary="response",
            model_name=_model_name(options.response_model),
            errors=error.errors(),
            status_code=response.status_code,
            raw_sample=_sample_payload(payload),
            resource_id=options.resource_id,
        ) from error


def _coerce_options(options: RequestOptions | None = None, **fields: Any) -> RequestOptions:
    if options is not None:
        return options

    if fields.get("operation") is None or fields.get("method") is None or fields.get("path") is None:
        raise TypeError("operation, method, and path are required when options are not provided")
    return RequestOptions(**fields)


class _TransportBase:
    def __init__(
        self,
        *,
        api_key: str | None,
        backend_id: str | None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._api_key = api_key
        self._backend_id = backend_id
        self._cancel_event = cancel_event

    def _build(self, options: RequestOptions) -> dict[str, Any]:
        headers = {**(options.headers or {}), **auth_headers(self._api_key, self._backend_id)}
        content, content_type = encode_body(options)
        if content_type is not None:
            headers["Content-Type"] = content_type
        headers.setdefault("Accept", JSON_CONTENT_TYPE)

        params = {key: _query_value(value) for key, value in (options.query or {}).items() if value is not None}
        extensions = {CANCEL_EVENT_EXTENSION: self._cancel_event} if self._cancel_event is not None else None
        return {
            "method": options.method,
            "url": options.path,
            "params": params or None,
            "content": content,
            "headers": headers,
            "extensions": extensions,
        }

    @staticmethod
    def _wrap_http_error(error: httpx.HTTPError, options: RequestOptions) -> TransportError:
        if isinstance(error, httpx.TimeoutException):
            return ClientTimeoutError(
                f"{options.operation} timed out: {error}",
                operation=options.operation,
                resource_id=options.resource_id,
            )
        return TransportError(
            f"{options.operation} failed: {error}",
            operation=options.operation,
            resource_id=options.resource_id,
        )


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SyncTransport(_TransportBase):
    def __init__(
        self,
        client: httpx.Client,
        *,
        api_key: str | None,
        backend_id: str | None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        super().__init__(api_key=api_key, backend_id=backend_id, cancel_event=cancel_event)
        self._client = client

    def request(self, options: RequestOptions | None = None, **fields: Any) -> Any:
        options = _coerce_options(options, **fields)
        prepared = self._build(options)

        try:
            response = self._client.request(**prepared)
        except httpx.HTTPError as error:
            raise self._wrap_http_error(error, options) from error

        validate_status(response, options)
        return decode_response(response, options)


class AsyncTransport(_TransportBase):
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str | None,
        backend_id: str | None,
    ) -> None:
        super().__init__(api_key=api_key, backend_id=backend_id)
        self._client = client

    async def request(self, options: RequestOptions | None = None, **fields: Any) -> Any:
        options = _coerce_options(options, **fields)
        prepared = self._build(options)

        try:
            response = await self._client.request(**prepared)
        except httpx.HTTPError as error:
            raise self._wrap_http_error(error, options) from error

        validate_status(response, options)
        return decode_response(response, options)
