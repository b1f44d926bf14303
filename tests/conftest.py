"""Shared fixtures: a small Outline-style OpenAPI spec and a mocked API."""

from __future__ import annotations

import copy
from typing import Any, Callable

import httpx
import pytest

from toolgen.dispatcher import OutlineClient
from toolgen.settings import Settings

# ---------------------------------------------------------------------------
# Spec fixture — a trimmed-down Outline API with refs, allOf and cycles
# ---------------------------------------------------------------------------

_SCHEMAS: dict[str, Any] = {
    "Document": {
        "type": "object",
        "properties": {
            "id": {"type": "string", "format": "uuid"},
            "title": {"type": "string", "description": "The title", "example": "Welcome"},
            "collectionId": {"type": "string", "nullable": True},
        },
        "required": ["id"],
    },
    "Pagination": {
        "type": "object",
        "properties": {
            "limit": {"type": "number", "example": 25},
            "offset": {"type": "number"},
        },
    },
    "Sorting": {
        "type": "object",
        "properties": {
            "direction": {"type": "string", "enum": ["ASC", "DESC"]},
        },
    },
    "DocumentsListRequest": {
        "allOf": [
            {"$ref": "#/components/schemas/Pagination"},
            {"$ref": "#/components/schemas/Sorting"},
            {
                "type": "object",
                "properties": {"collectionId": {"type": "string"}},
            },
        ],
    },
    "NavigationNode": {
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "children": {
                "type": "array",
                "items": {"$ref": "#/components/schemas/NavigationNode"},
            },
        },
    },
    "Permission": {"type": "string", "enum": ["read", "read_write"]},
}


def _json_body(schema: dict[str, Any]) -> dict[str, Any]:
    return {"content": {"application/json": {"schema": schema}}}


def _ok(schema: dict[str, Any]) -> dict[str, Any]:
    return {"200": {"description": "OK", **_json_body(schema)}}


_PATHS: dict[str, Any] = {
    "/documents.info": {
        "post": {
            "operationId": "documents.info",
            "summary": "Retrieve a document",
            "description": "Retrieve a document by its ID.",
            "requestBody": _json_body({
                "type": "object",
                "properties": {"id": {"type": "string"}},
                "required": ["id"],
            }),
            "responses": _ok({
                "type": "object",
                "properties": {"data": {"$ref": "#/components/schemas/Document"}},
            }),
        },
    },
    "/documents.list": {
        "post": {
            "operationId": "documents.list",
            "summary": "List all documents",
            "description": "List documents the user has access to.",
            "requestBody": _json_body({"$ref": "#/components/schemas/DocumentsListRequest"}),
            "responses": _ok({
                "type": "object",
                "properties": {
                    "data": {"type": "array", "items": {"$ref": "#/components/schemas/Document"}},
                },
            }),
        },
    },
    "/documents.delete": {
        "post": {
            "operationId": "documents.delete",
            "summary": "Delete a document",
            "requestBody": _json_body({
                "type": "object",
                "properties": {"id": {"type": "string"}, "permanent": {"type": "boolean"}},
                "required": ["id"],
            }),
            "responses": _ok({"type": "object", "properties": {"success": {"type": "boolean"}}}),
        },
    },
    "/collections.list": {
        "post": {
            "operationId": "collections.list",
            "responses": _ok({"type": "array", "items": {"type": "object"}}),
        },
    },
    "/collections.documents": {
        "post": {
            "operationId": "collections.documents",
            "requestBody": _json_body({
                "type": "object",
                "properties": {"id": {"type": "string"}},
            }),
            "responses": _ok({
                "type": "object",
                "properties": {"data": {"$ref": "#/components/schemas/NavigationNode"}},
            }),
        },
    },
    "/collections.add_user": {
        "post": {
            "operationId": "collections.add_user",
            "requestBody": _json_body({
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "permission": {"$ref": "#/components/schemas/Permission"},
                },
                "required": ["id"],
            }),
            "responses": {"201": {"description": "Created", **_json_body({
                "type": "object",
                "properties": {"data": {"type": "object"}},
            })}},
        },
    },
    "/auth.info": {
        "post": {
            "responses": _ok({"type": "object", "properties": {"data": {"type": "object"}}}),
        },
    },
    "/attachments.redirect": {
        "post": {
            "operationId": "attachments.redirect",
            "requestBody": _json_body({
                "type": "object",
                "properties": {"id": {"type": "string"}},
                "required": ["id"],
            }),
            "responses": {"302": {"description": "Redirect to the attachment"}},
        },
    },
    "/documents.tags": {
        "post": {
            "operationId": "documents.tags",
            "requestBody": _json_body({"type": "array", "items": {"type": "string"}}),
        },
    },
}

OUTLINE_SPEC: dict[str, Any] = {
    "openapi": "3.0.0",
    "info": {"title": "Outline API", "version": "0.1.0"},
    "paths": _PATHS,
    "components": {"schemas": _SCHEMAS},
}


@pytest.fixture
def outline_spec() -> dict[str, Any]:
    """A fresh copy of the sample spec for each test."""
    return copy.deepcopy(OUTLINE_SPEC)


# ---------------------------------------------------------------------------
# Dispatcher fixtures — httpx.MockTransport instead of a live Outline
# ---------------------------------------------------------------------------

OUTLINE_TEST_URL = "https://outline.test/api"
OUTLINE_TEST_API_KEY = "test-api-key"


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key=OUTLINE_TEST_API_KEY, base_url=OUTLINE_TEST_URL)


@pytest.fixture
def make_client(settings) -> Callable[[Callable[[httpx.Request], httpx.Response]], OutlineClient]:
    """Return a factory building an OutlineClient around a request handler.

    Usage in tests::

        client = make_client(lambda request: httpx.Response(200, json={}))
    """
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> OutlineClient:
        transport = httpx.MockTransport(handler)
        return OutlineClient(settings, httpx.AsyncClient(transport=transport))
    return _make
