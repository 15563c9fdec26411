"""Tests for page loading."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from myst2ipynb import DocumentLoadError
from myst2ipynb.models import ParsedDocument
from myst2ipynb.parsing.document import DocumentLoader


class TestDocumentLoader:
    """Tests for DocumentLoader."""

    def test_load_page(self, tmp_path, sample_page_data):
        """Test loading a page JSON written by MyST."""
        page = tmp_path / "intro.json"
        page.write_text(json.dumps(sample_page_data), encoding="utf-8")

        document = DocumentLoader().load(page)

        assert isinstance(document, ParsedDocument)
        assert document.path == page
        assert document.location == "/chapter/intro.md"
        assert document.frontmatter.title == "Linear Regression"
        assert document.frontmatter.kernelspec.name == "python3"
        assert document.mdast["type"] == "root"
        assert len(document.mdast["children"]) == 3

    def test_load_bare_root(self, tmp_path):
        """Test loading a file holding only the root node."""
        page = tmp_path / "tree.json"
        page.write_text(json.dumps({"type": "root", "children": []}), encoding="utf-8")

        document = DocumentLoader().load(str(page))

        assert document.mdast == {"type": "root", "children": []}
        assert document.frontmatter.kernelspec is None
        assert document.location is None

    def test_unknown_frontmatter_kept(self):
        """Test frontmatter keys the exporter does not use are preserved."""
        content = {"mdast": {"type": "root", "children": []}, "frontmatter": {"title": "T", "authors": ["A"]}}

        document = DocumentLoader().from_dict(content, "page.json")

        assert document.frontmatter.model_extra == {"authors": ["A"]}

    def test_missing_file(self, tmp_path):
        """Test a missing file raises."""
        with pytest.raises(DocumentLoadError, match="Document file not found"):
            DocumentLoader().load(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON raises."""
        page = tmp_path / "bad.json"
        page.write_text("{not json", encoding="utf-8")

        with pytest.raises(DocumentLoadError, match="Failed to read document"):
            DocumentLoader().load(page)

    def test_not_an_object(self, tmp_path):
        """Test a JSON list raises."""
        page = tmp_path / "list.json"
        page.write_text("[]", encoding="utf-8")

        with pytest.raises(DocumentLoadError, match="is not a JSON object"):
            DocumentLoader().load(page)

    @pytest.mark.parametrize("mdast", [None, [], {"type": "paragraph"}])
    def test_missing_root(self, mdast):
        """Test a page without a root node raises."""
        with pytest.raises(DocumentLoadError, match="has no mdast root node"):
            DocumentLoader().from_dict({"mdast": mdast}, "page.json")

    def test_invalid_frontmatter(self):
        """Test a malformed kernelspec raises."""
        content = {"mdast": {"type": "root", "children": []}, "frontmatter": {"kernelspec": "python3"}}

        with pytest.raises(DocumentLoadError, match="Invalid frontmatter"):
            DocumentLoader().from_dict(content, "page.json")

    def test_non_string_location_ignored(self):
        """Test a malformed location is ignored."""
        content = {"mdast": {"type": "root", "children": []}, "location": 3}

        assert DocumentLoader().from_dict(content, "page.json").location is None


class TestParsedDocument:
    """Tests for the ParsedDocument model."""

    def test_fields_validated(self):
        """Test plain JSON values are coerced to the field types."""
        document = ParsedDocument.model_validate(
            {"path": "build/page.json", "mdast": {"type": "root", "children": []}, "frontmatter": {"title": "T"}}
        )

        assert document.path == Path("build/page.json")
        assert document.frontmatter.title == "T"
        assert document.location is None

    def test_invalid_mdast_rejected(self):
        """Test a tree that is not an object fails validation."""
        with pytest.raises(ValidationError):
            ParsedDocument(path="page.json", mdast=["not", "a", "node"])

    def test_json_schema(self):
        """Test the model has a JSON schema."""
        schema = ParsedDocument.model_json_schema()

        assert schema["required"] == ["path", "mdast"]
