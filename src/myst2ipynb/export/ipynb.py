"""Assemble a Jupyter notebook from a MyST document tree."""

import copy
import re
from typing import Any, Mapping, Optional, Union

import nbformat

from myst2ipynb.models import (
    CodeCell,
    GenericNode,
    IpynbOptions,
    MarkdownCell,
    NotebookCell,
    NotebookDocument,
    PageFrontmatter,
)
from myst2ipynb.serializer import DiagnosticSink, MarkdownSerializer, write_md
from myst2ipynb.transforms.attachments import embed_images_as_attachments
from myst2ipynb.transforms.commonmark import transform_to_commonmark
from myst2ipynb.transforms.gated import lift_gated_code_cells
from myst2ipynb.transforms.nodes import children_of, is_code_cell, select

DEFAULT_LANGUAGE = "python"

# MyST "+++" cell breaks mean nothing inside a notebook cell
LEADING_BLOCK_MARKERS = re.compile(r"\A(?:\+\+\+[^\n]*(?:\n|\Z))+")


def source_to_string_list(source: str) -> list[str]:
    """Split cell source into nbformat lines.

    Every line keeps its trailing newline except the last, which has
    trailing whitespace removed.
    """
    lines = [f"{line}\n" for line in source.split("\n")]
    lines[-1] = lines[-1].rstrip()
    return lines


def strip_block_markers(md: str) -> str:
    """Remove leading ``+++`` block marker lines from markdown."""
    return LEADING_BLOCK_MARKERS.sub("", md)


def _frontmatter(frontmatter: Union[PageFrontmatter, Mapping[str, Any], None]) -> PageFrontmatter:
    if frontmatter is None:
        return PageFrontmatter()
    if isinstance(frontmatter, PageFrontmatter):
        return frontmatter
    return PageFrontmatter.model_validate(dict(frontmatter))


def _options(options: Union[IpynbOptions, Mapping[str, Any], None]) -> IpynbOptions:
    if options is None:
        return IpynbOptions()
    if isinstance(options, IpynbOptions):
        return options
    return IpynbOptions.model_validate(dict(options))


def build_metadata(frontmatter: PageFrontmatter) -> dict[str, Any]:
    """Build notebook metadata from the page kernelspec.

    Args:
        frontmatter: Page frontmatter

    Returns:
        dict: ``language_info`` always, ``kernelspec`` only when the page has one
    """
    kernelspec = frontmatter.kernelspec
    language = (kernelspec.language or kernelspec.name if kernelspec else None) or DEFAULT_LANGUAGE

    metadata: dict[str, Any] = {"language_info": {"name": language}}
    if kernelspec is not None:
        metadata["kernelspec"] = {
            key: value
            for key, value in (
                ("name", kernelspec.name),
                ("display_name", kernelspec.display_name),
                ("language", language),
            )
            if value is not None
        }
    return metadata


class NotebookAssembler:
    """Turn the top-level units of a document into notebook cells.

    Notebook code blocks become code cells; everything else is serialized
    to markdown, one cell per top-level unit.
    """

    def __init__(
        self,
        options: Union[IpynbOptions, Mapping[str, Any], None] = None,
        serializer: MarkdownSerializer = write_md,
        diagnostics: Optional[DiagnosticSink] = None,
    ):
        """Initialize the assembler.

        Args:
            options: Export options
            serializer: Markdown serializer for markdown cells
            diagnostics: Sink passed through to the serializer
        """
        self.options = _options(options)
        self.serializer = serializer
        self.diagnostics = diagnostics

    def assemble(
        self,
        root: GenericNode,
        frontmatter: Union[PageFrontmatter, Mapping[str, Any], None] = None,
    ) -> NotebookDocument:
        """Assemble a notebook from a document root.

        The caller's tree is never modified by the CommonMark conversion;
        each markdown unit is converted on its own copy.

        Args:
            root: Document root node
            frontmatter: Page frontmatter, used for kernel metadata

        Returns:
            NotebookDocument: The assembled notebook
        """
        units = lift_gated_code_cells(children_of(root), drop_solutions=self.options.drops_solutions)

        cells: list[NotebookCell] = []
        for unit in units:
            if is_code_cell(unit):
                cells.append(self.code_cell(unit))
                continue
            cell = self.markdown_cell(unit)
            # Cells with nothing but dropped labels or comments disappear
            if not cell.is_empty():
                cells.append(cell)

        return NotebookDocument(cells=cells, metadata=build_metadata(_frontmatter(frontmatter)))

    def code_cell(self, unit: GenericNode) -> CodeCell:
        code = select(unit, "code") or {}
        return CodeCell(source=source_to_string_list(code.get("value") or ""))

    def markdown_cell(self, unit: GenericNode) -> MarkdownCell:
        """Serialize one top-level unit into a markdown cell."""
        tree: GenericNode = {"type": "root", "children": [unit]}
        if self.options.markdown == "commonmark":
            tree = transform_to_commonmark(copy.deepcopy(tree), self.options.commonmark)

        md = strip_block_markers(self.serializer(tree, self.diagnostics))

        attachments = None
        if self.options.images == "attachment":
            md, attachments = embed_images_as_attachments(md, self.options.image_data)

        return MarkdownCell(source=source_to_string_list(md), attachments=attachments)


def assemble(
    root: GenericNode,
    frontmatter: Union[PageFrontmatter, Mapping[str, Any], None] = None,
    options: Union[IpynbOptions, Mapping[str, Any], None] = None,
    serializer: MarkdownSerializer = write_md,
    diagnostics: Optional[DiagnosticSink] = None,
) -> NotebookDocument:
    """Assemble a notebook from a MyST document tree.

    Args:
        root: Document root node
        frontmatter: Page frontmatter
        options: Export options
        serializer: Markdown serializer for markdown cells
        diagnostics: Sink for serializer diagnostics

    Returns:
        NotebookDocument: The assembled notebook
    """
    assembler = NotebookAssembler(options, serializer=serializer, diagnostics=diagnostics)
    return assembler.assemble(root, frontmatter)


def to_notebook_node(notebook: NotebookDocument) -> nbformat.NotebookNode:
    """Convert an assembled notebook to an nbformat NotebookNode."""
    return nbformat.from_dict(notebook.to_dict())


def write_ipynb(
    root: GenericNode,
    frontmatter: Union[PageFrontmatter, Mapping[str, Any], None] = None,
    options: Union[IpynbOptions, Mapping[str, Any], None] = None,
    serializer: MarkdownSerializer = write_md,
    diagnostics: Optional[DiagnosticSink] = None,
) -> str:
    """Assemble a notebook and return it as .ipynb JSON text."""
    notebook = assemble(root, frontmatter, options, serializer=serializer, diagnostics=diagnostics)
    return nbformat.writes(to_notebook_node(notebook))
