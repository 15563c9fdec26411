"""Notebook export: assembly, image collection and orchestration."""

from myst2ipynb.export.images import collect_image_data, resolve_image_path
from myst2ipynb.export.ipynb import (
    NotebookAssembler,
    assemble,
    source_to_string_list,
    strip_block_markers,
    write_ipynb,
)

__all__ = [
    "collect_image_data",
    "resolve_image_path",
    "NotebookAssembler",
    "assemble",
    "source_to_string_list",
    "strip_block_markers",
    "write_ipynb",
]
