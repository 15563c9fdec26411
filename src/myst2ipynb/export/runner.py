"""Run a complete ipynb export for one MyST page."""

import logging
import time
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from myst2ipynb import ConfigurationError
from myst2ipynb.export.images import collect_image_data
from myst2ipynb.export.ipynb import NotebookAssembler
from myst2ipynb.models import ExportOptions, NotebookDocument, ParsedDocument
from myst2ipynb.output.writer import NotebookWriter
from myst2ipynb.parsing.document import DocumentLoader
from myst2ipynb.serializer import MarkdownSerializer, write_md

logger = logging.getLogger(__name__)


def build_export_options(**values: Any) -> ExportOptions:
    """Validate export settings from frontmatter, config or the command line.

    Raises:
        ConfigurationError: If a setting has an invalid value
    """
    try:
        return ExportOptions.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid export options: {e}") from e


def resolve_source_file(document: ParsedDocument, source_root: Path) -> Path:
    """Find the markdown file a page was built from.

    MyST records the page location relative to the project root; without
    it, the page JSON file itself stands in for the document.
    """
    if document.location:
        return source_root / document.location.lstrip("/\\")
    return document.path


def export_document(
    document: ParsedDocument,
    export_options: ExportOptions,
    source_root: Optional[Path | str] = None,
    serializer: MarkdownSerializer = write_md,
) -> NotebookDocument:
    """Assemble the notebook for an already loaded page.

    Args:
        document: Loaded MyST page
        export_options: Export configuration
        source_root: Project source root (default: the page JSON's directory)
        serializer: Markdown serializer for markdown cells

    Returns:
        NotebookDocument: The assembled notebook
    """
    root = Path(source_root) if source_root is not None else document.path.parent
    options = export_options.to_ipynb_options()

    if options.images == "attachment":
        source_file = resolve_source_file(document, root)
        options.image_data = collect_image_data(document.mdast, source_file, root)

    assembler = NotebookAssembler(options, serializer=serializer, diagnostics=logger.debug)
    return assembler.assemble(document.mdast, document.frontmatter)


def run_ipynb_export(
    source: Path | str,
    export_options: ExportOptions,
    source_root: Optional[Path | str] = None,
    serializer: MarkdownSerializer = write_md,
) -> Path:
    """Load a MyST page, export it as a notebook and write it to disk.

    Args:
        source: Path to the page JSON
        export_options: Export configuration, including the output path
        source_root: Project source root (default: the page JSON's directory)
        serializer: Markdown serializer for markdown cells

    Returns:
        Path: Path to the written notebook

    Raises:
        DocumentLoadError: If the page cannot be loaded
        ExportError: If the notebook cannot be written
    """
    start = time.perf_counter()

    document = DocumentLoader().load(source)
    notebook = export_document(document, export_options, source_root, serializer)
    output = NotebookWriter().write(notebook, export_options.output)

    logger.info("Exported IPYNB in %.2fs, copying to %s", time.perf_counter() - start, output)
    return output
