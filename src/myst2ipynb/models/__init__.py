"""Data models for myst2ipynb."""

from myst2ipynb.models.notebook import (
    NBFORMAT,
    NBFORMAT_MINOR,
    CodeCell,
    MarkdownCell,
    NotebookCell,
    NotebookDocument,
)
from myst2ipynb.models.options import (
    CommonMarkOptions,
    ExportOptions,
    ImageData,
    IpynbOptions,
    Kernelspec,
    PageFrontmatter,
)
from myst2ipynb.models.document import GenericNode, ParsedDocument

__all__ = [
    "NBFORMAT",
    "NBFORMAT_MINOR",
    "CodeCell",
    "MarkdownCell",
    "NotebookCell",
    "NotebookDocument",
    "CommonMarkOptions",
    "ExportOptions",
    "ImageData",
    "IpynbOptions",
    "Kernelspec",
    "PageFrontmatter",
    "GenericNode",
    "ParsedDocument",
]
