"""Tests for the loader module."""

import json

import pytest
import yaml

from toolgen.errors import UnresolvableReferenceError
from toolgen.loader import (
    get_paths,
    get_request_schema,
    get_response_schema,
    load_spec,
    resolve_ref,
)


class TestLoadSpec:
    """Test reading JSON and YAML documents."""

    def test_yaml(self, tmp_path, outline_spec):
        path = tmp_path / "outline-openapi.yml"
        path.write_text(yaml.safe_dump(outline_spec))
        assert load_spec(path) == outline_spec

    def test_json(self, tmp_path, outline_spec):
        path = tmp_path / "openapi.json"
        path.write_text(json.dumps(outline_spec))
        assert load_spec(str(path)) == outline_spec

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_spec(path) == {}


class TestAccessors:
    """Test path, schema, request and response extraction."""

    def test_paths_keep_document_order(self, outline_spec):
        assert list(get_paths(outline_spec))[:2] == ["/documents.info", "/documents.list"]

    def test_missing_sections(self):
        assert get_paths({}) == {}

    def test_request_schema(self, outline_spec):
        op = outline_spec["paths"]["/documents.list"]["post"]
        assert get_request_schema(op) == {"$ref": "#/components/schemas/DocumentsListRequest"}

    def test_no_request_schema(self, outline_spec):
        op = outline_spec["paths"]["/auth.info"]["post"]
        assert get_request_schema(op) is None

    def test_response_prefers_200(self):
        op = {
            "responses": {
                "201": {"content": {"application/json": {"schema": {"type": "string"}}}},
                "200": {"content": {"application/json": {"schema": {"type": "object"}}}},
            }
        }
        assert get_response_schema(op) == {"type": "object"}

    def test_response_falls_back_to_201(self, outline_spec):
        op = outline_spec["paths"]["/collections.add_user"]["post"]
        assert get_response_schema(op)["properties"] == {"data": {"type": "object"}}

    def test_response_without_json_content(self, outline_spec):
        op = outline_spec["paths"]["/attachments.redirect"]["post"]
        assert get_response_schema(op) is None


class TestResolveRef:
    """Test $ref pointer lookup."""

    def test_component_schema(self, outline_spec):
        node = resolve_ref(outline_spec, "#/components/schemas/Permission")
        assert node["enum"] == ["read", "read_write"]

    def test_escaped_segments(self):
        spec = {"paths": {"/documents.info": {"post": {"x": 1}}}}
        assert resolve_ref(spec, "#/paths/~1documents.info/post") == {"x": 1}

    def test_tilde_escape(self):
        assert resolve_ref({"a~b": 2}, "#/a~0b") == 2

    def test_list_index(self):
        spec = {"items": [{"type": "string"}, {"type": "number"}]}
        assert resolve_ref(spec, "#/items/1") == {"type": "number"}

    def test_missing_segment_raises(self, outline_spec):
        with pytest.raises(UnresolvableReferenceError) as excinfo:
            resolve_ref(outline_spec, "#/components/schemas/Missing")
        assert excinfo.value.ref == "#/components/schemas/Missing"
        assert "#/components/schemas/Missing" in str(excinfo.value)

    def test_external_ref_unsupported(self, outline_spec):
        with pytest.raises(UnresolvableReferenceError, match="Unsupported"):
            resolve_ref(outline_spec, "other.yml#/components/schemas/Document")
