"""Dispatch generated tools against the Outline API.

Every Outline method is an RPC-style POST to {base_url}/{method_name}
with a JSON body. Arguments are validated before any request is sent;
responses are returned raw, plus a structured view checked by the
output validator when the tool has one.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import OutlineAPIError, ToolInputError, ToolOutputError, ValidationError
from .models import ToolDefinition
from .settings import Settings

logger = logging.getLogger(__name__)


def _error_guidance(response: httpx.Response) -> str:
    """Extra hint appended to API error messages."""
    status = response.status_code
    if status in (401, 403):
        return " Check OUTLINE_API_KEY and make sure it has the required scopes."
    if status == 429:
        retry_after = response.headers.get("retry-after")
        if retry_after:
            return f" Retry after {retry_after} seconds."
        return " Slow down requests and retry later."
    if status == 400:
        return " Validate your request payload against the tool schema."
    return ""


def _read_body(response: httpx.Response) -> Any:
    if "application/json" in response.headers.get("content-type", ""):
        return response.json()
    return response.text


class OutlineClient:
    """Thin async client for Outline's RPC endpoints."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)

    async def __aenter__(self) -> OutlineClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def url_for(self, method_name: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{method_name.lstrip('/')}"

    async def call(self, method_name: str, payload: dict[str, Any]) -> Any:
        """POST a payload to an Outline method and return the decoded body."""
        logger.info("Outline API request: %s", method_name)
        response = await self._client.post(
            self.url_for(method_name),
            json=payload,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {self.settings.api_key}",
            },
            follow_redirects=False,
        )

        if response.status_code == 302:
            return {
                "ok": True,
                "status": response.status_code,
                "location": response.headers.get("location"),
            }

        body = _read_body(response)
        if response.is_success:
            return body

        if isinstance(body, dict) and body.get("error"):
            error_message = str(body["error"])
        else:
            error_message = f"Request failed with status {response.status_code}"
        message = f"Outline API error: {error_message}.{_error_guidance(response)}"
        logger.error(message)
        raise OutlineAPIError(response.status_code, message)


@dataclass(frozen=True)
class ToolResult:
    """Raw API response plus the validated structured view, if any."""

    raw: Any
    structured: dict[str, Any] | None = None

    def to_mcp(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "content": [{"type": "text", "text": json.dumps(self.raw, indent=2, default=str)}],
        }
        if self.structured is not None:
            result["structuredContent"] = self.structured
        return result


def validate_arguments(tool: ToolDefinition, arguments: Any) -> dict[str, Any]:
    """Check caller arguments against the tool's input validator."""
    try:
        return tool.input_validator.validate({} if arguments is None else arguments)
    except ValidationError as e:
        raise ToolInputError(tool.name, e) from e


async def dispatch(
    tool: ToolDefinition,
    arguments: dict[str, Any] | None,
    client: OutlineClient,
) -> ToolResult:
    """Validate arguments, call the API method and shape the result."""
    payload = validate_arguments(tool, arguments)
    logger.info("Outline tool request: %s -> %s", tool.name, tool.method_name)

    response = await client.call(tool.method_name, payload)

    if tool.output_validator is None:
        return ToolResult(raw=response)

    view = response if isinstance(response, dict) else {"value": response}
    try:
        structured = tool.output_validator.validate(view)
    except ValidationError as e:
        raise ToolOutputError(tool.name, e) from e
    return ToolResult(raw=response, structured=structured)
