"""Loading of MyST page JSON files."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from myst2ipynb import DocumentLoadError
from myst2ipynb.models import PageFrontmatter, ParsedDocument


class DocumentLoader:
    """Loader for MyST pages.

    Reads the JSON that ``myst build`` writes for each page (an object with
    ``mdast``, ``frontmatter`` and ``location`` keys) or a bare ``root``
    node.
    """

    def load(self, filepath: Path | str) -> ParsedDocument:
        """Load a MyST page JSON file.

        Args:
            filepath: Path to the .json file

        Returns:
            ParsedDocument: The loaded page

        Raises:
            DocumentLoadError: If loading fails
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise DocumentLoadError(f"Document file not found: {filepath}")

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                content = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DocumentLoadError(f"Failed to read document {filepath}: {e}") from e

        return self.from_dict(content, filepath)

    def from_dict(self, content: Any, filepath: Path | str) -> ParsedDocument:
        """Build a page from already decoded JSON.

        Args:
            content: Decoded page JSON or root node
            filepath: Path the content was read from

        Returns:
            ParsedDocument: The loaded page

        Raises:
            DocumentLoadError: If the content holds no document tree
        """
        if not isinstance(content, dict):
            raise DocumentLoadError(f"Document {filepath} is not a JSON object")

        # Bare root node
        if content.get("type") == "root":
            return ParsedDocument(path=Path(filepath), mdast=content)

        mdast = content.get("mdast")
        if not isinstance(mdast, dict) or mdast.get("type") != "root":
            raise DocumentLoadError(f"Document {filepath} has no mdast root node")

        try:
            frontmatter = PageFrontmatter.model_validate(content.get("frontmatter") or {})
        except ValidationError as e:
            raise DocumentLoadError(f"Invalid frontmatter in {filepath}: {e}") from e

        location = content.get("location")
        return ParsedDocument(
            path=Path(filepath),
            mdast=mdast,
            frontmatter=frontmatter,
            location=location if isinstance(location, str) else None,
        )
