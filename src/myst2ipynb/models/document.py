"""Data models for loaded MyST documents."""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from myst2ipynb.models.options import PageFrontmatter

# A MyST AST node in its JSON form: {"type": ..., "children": [...], ...}
GenericNode = dict[str, Any]


class ParsedDocument(BaseModel):
    """A MyST page ready for export.

    Attributes:
        path: Path of the JSON file the page was loaded from
        mdast: Root node of the document tree
        frontmatter: Page frontmatter
        location: Source location recorded by MyST (e.g. "/chapter/page.md")
    """

    path: Path
    mdast: GenericNode
    frontmatter: PageFrontmatter = Field(default_factory=PageFrontmatter)
    location: Optional[str] = None
