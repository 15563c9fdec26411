"""Data models for the Jupyter notebook document being assembled."""

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

NBFORMAT = 4
NBFORMAT_MINOR = 2


class CodeCell(BaseModel):
    """An executable notebook cell.

    Attributes:
        source: Cell source as line strings, each keeping its newline except the last
        metadata: Cell metadata (empty by default)
        execution_count: Always None, exported notebooks are unexecuted
        outputs: Always empty for the same reason
    """

    cell_type: Literal["code"] = "code"
    source: list[str]
    metadata: dict[str, Any] = Field(default_factory=dict)
    execution_count: Optional[int] = None
    outputs: list[dict[str, Any]] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cell_type": self.cell_type,
            "execution_count": self.execution_count,
            "metadata": dict(self.metadata),
            "outputs": list(self.outputs),
            "source": list(self.source),
        }


class MarkdownCell(BaseModel):
    """A rendered markdown notebook cell.

    Attributes:
        source: Cell source as line strings, each keeping its newline except the last
        metadata: Cell metadata (empty by default)
        attachments: Attachment name -> {mime type: base64 data}, None when there are none
    """

    cell_type: Literal["markdown"] = "markdown"
    source: list[str]
    metadata: dict[str, Any] = Field(default_factory=dict)
    attachments: Optional[dict[str, dict[str, str]]] = None

    def is_empty(self) -> bool:
        """Check whether the cell has no visible content."""
        return not "".join(self.source).strip()

    def to_dict(self) -> dict[str, Any]:
        cell: dict[str, Any] = {
            "cell_type": self.cell_type,
            "metadata": dict(self.metadata),
            "source": list(self.source),
        }
        # An empty attachments object is never written
        if self.attachments:
            cell["attachments"] = {name: dict(bundle) for name, bundle in self.attachments.items()}
        return cell


NotebookCell = Union[CodeCell, MarkdownCell]


class NotebookDocument(BaseModel):
    """Complete notebook document in nbformat 4.2 shape.

    Attributes:
        cells: Ordered notebook cells
        metadata: Notebook metadata (language_info and optional kernelspec)
        nbformat: Major format version
        nbformat_minor: Minor format version
    """

    cells: list[NotebookCell] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    nbformat: int = NBFORMAT
    nbformat_minor: int = NBFORMAT_MINOR

    @property
    def code_cells(self) -> list[CodeCell]:
        return [cell for cell in self.cells if isinstance(cell, CodeCell)]

    @property
    def markdown_cells(self) -> list[MarkdownCell]:
        return [cell for cell in self.cells if isinstance(cell, MarkdownCell)]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the plain JSON structure of an .ipynb file."""
        return {
            "cells": [cell.to_dict() for cell in self.cells],
            "metadata": self.metadata,
            "nbformat": self.nbformat,
            "nbformat_minor": self.nbformat_minor,
        }
