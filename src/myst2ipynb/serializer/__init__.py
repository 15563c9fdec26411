"""Markdown serialization of document trees."""

from myst2ipynb.serializer.markdown import DiagnosticSink, MarkdownSerializer, MarkdownWriter, write_md

__all__ = ["DiagnosticSink", "MarkdownSerializer", "MarkdownWriter", "write_md"]
