"""Content-type helpers and the YAML content-type correction transports."""

from __future__ import annotations

import json
import re
from typing import Any

import httpx
import yaml

JSON_CONTENT_TYPE = "application/json"
YAML_CONTENT_TYPE = "application/x-yaml"

# Successful monitor GETs return a YAML document without a usable content type.
DEFAULT_YAML_PATH_PATTERN = re.compile(r"^/api/monitors/[^/]+/?$")

_YAML_MARKERS = ("yaml", "yml")


def is_yaml_content_type(content_type: str) -> bool:
    lowered = content_type.lower()
    return any(marker in lowered for marker in _YAML_MARKERS)


def is_json_content_type(content_type: str) -> bool:
    lowered = content_type.lower()
    return "application/json" in lowered or lowered.endswith("+json")


def dump_yaml(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)


def dump_json(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def load_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def _with_yaml_content_type(request: httpx.Request, response: httpx.Response, pattern: re.Pattern[str]) -> httpx.Response:
    if request.method != "GET" or response.status_code != 200:
        return response
    if pattern.match(request.url.path) is None:
        return response
    response.headers["Content-Type"] = YAML_CONTENT_TYPE
    return response


class YamlContentTypeTransport(httpx.BaseTransport):
    def __init__(self, transport: httpx.BaseTransport, *, path_pattern: re.Pattern[str] | str | None = None) -> None:
        self._transport = transport
        self._pattern = re.compile(path_pattern) if isinstance(path_pattern, str) else (path_pattern or DEFAULT_YAML_PATH_PATTERN)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        response = self._transport.handle_request(request)
        return _with_yaml_content_type(request, response, self._pattern)

    def close(self) -> None:
        self._transport.close()


class AsyncYamlContentTypeTransport(httpx.AsyncBaseTransport):
    def __init__(
        self, transport: httpx.AsyncBaseTransport, *, path_pattern: re.Pattern[str] | str | None = None
    ) -> None:
        self._transport = transport
        self._pattern = re.compile(path_pattern) if isinstance(path_pattern, str) else (path_pattern or DEFAULT_YAML_PATH_PATTERN)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        response = await self._transport.handle_async_request(request)
        return _with_yaml_content_type(request, response, self._pattern)

    async def aclose(self) -> None:
        await self._transport.aclose()
