"""Integration tests for the OpenRPC parser."""

from pathlib import Path

import pytest
from rpcdiff.errors import DocumentLoadError, DocumentParseError
from rpcdiff.modules.openrpc_parser import load_document_from_file, parse_document
from rpcdiff.types import ContentDescriptor, ParamStructure, Reference, Schema


TESTDATA = Path(__file__).parent.parent / "testdata"

SAMPLE_DOCUMENT = """
openrpc: "1.2.6"
info:
  title: Users API
  version: "1.0.0"
methods:
  - name: user.get
    paramStructure: by-name
    params:
      - name: id
        required: true
        schema:
          type: integer
    result:
      name: user
      schema:
        $ref: "#/components/schemas/User"
    errors:
      - code: 404
        message: Not found
  - name: user.update
    params:
      - $ref: "#/components/contentDescriptors/UserParam"
    result:
      name: ok
      schema:
        type: boolean
components:
  contentDescriptors:
    UserParam:
      name: user
      required: true
      schema:
        $ref: "#/components/schemas/User"
  schemas:
    User:
      type: object
      required:
        - id
      properties:
        id:
          type: integer
        tags:
          type: array
          items:
            type: string
"""


class TestOpenRPCParser:
    """Tests for OpenRPC parsing."""

    def test_parse_yaml(self):
        """Parse a basic OpenRPC document written in YAML."""
        document = parse_document(SAMPLE_DOCUMENT)

        assert document.openrpc == "1.2.6"
        assert document.info.title == "Users API"
        assert [method.name for method in document.methods] == ["user.get", "user.update"]

    def test_parse_json_file(self):
        """JSON documents load from disk."""
        document = load_document_from_file(str(TESTDATA / "openrpc_old.json"))

        assert document.info.title == "Arith service"
        assert len(document.methods) == 4
        assert set(document.schemas) == {"Quotient", "Question", "Answer"}

    def test_parse_mapping(self):
        """Already decoded mappings are accepted."""
        document = parse_document({"openrpc": "1.2.6", "info": {"title": "t", "version": "1"}})

        assert document.methods == []
        assert document.schemas == {}

    def test_param_structure_default(self):
        """paramStructure defaults to either."""
        document = parse_document(SAMPLE_DOCUMENT)

        assert document.methods[0].param_structure == ParamStructure.BY_NAME
        assert document.methods[1].param_structure == ParamStructure.EITHER

    def test_references_are_discriminated(self):
        """$ref objects parse as references, others inline."""
        document = parse_document(SAMPLE_DOCUMENT)
        get, update = document.methods

        assert isinstance(get.params[0], ContentDescriptor)
        assert isinstance(get.params[0].schema_, Schema)
        assert isinstance(get.result.schema_, Reference)
        assert get.result.schema_.target == "User"
        assert isinstance(update.params[0], Reference)
        assert update.params[0].target == "UserParam"

    def test_shared_components(self):
        """Shared schemas and content descriptors are typed."""
        document = parse_document(SAMPLE_DOCUMENT)

        user = document.schemas["User"]
        assert isinstance(user, Schema)
        assert user.required == ["id"]
        assert isinstance(user.properties["tags"].items, Schema)
        assert document.content_descriptors["UserParam"].required is True

    def test_error_codes(self):
        """Errors keep their integer codes."""
        document = parse_document(SAMPLE_DOCUMENT)

        assert document.methods[0].errors[0].code == 404


class TestParseErrors:
    """Tests for rejected input."""

    def test_malformed_text(self):
        with pytest.raises(DocumentParseError, match="Malformed"):
            parse_document("openrpc: [1.2.6")

    def test_not_an_object(self):
        with pytest.raises(DocumentParseError, match="Expected a JSON object"):
            parse_document("- just\n- a list\n")

    def test_missing_openrpc_field(self):
        """An OpenAPI document is not mistaken for OpenRPC."""
        with pytest.raises(DocumentParseError, match="openrpc"):
            parse_document({"openapi": "3.0.3", "info": {"title": "t", "version": "1"}})

    def test_invalid_structure(self):
        with pytest.raises(DocumentParseError, match="Invalid OpenRPC document"):
            parse_document({"openrpc": "1.2.6", "info": {"title": "t"}})

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_document("42")

    def test_missing_file(self, tmp_path):
        missing = tmp_path / "missing.json"
        with pytest.raises(DocumentLoadError) as exc_info:
            load_document_from_file(str(missing))

        assert exc_info.value.source == str(missing)
        assert str(missing) in str(exc_info.value)
