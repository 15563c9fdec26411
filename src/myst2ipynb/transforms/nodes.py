"""Helpers for working with MyST trees in their JSON form."""

from typing import Iterator, Optional

from myst2ipynb.models import GenericNode

NOTEBOOK_CODE_KIND = "notebook-code"


def children_of(node: GenericNode) -> list[GenericNode]:
    """Return a node's children, treating a missing or malformed list as empty."""
    children = node.get("children")
    if not isinstance(children, list):
        return []
    return [child for child in children if isinstance(child, dict)]


def walk(node: GenericNode) -> Iterator[GenericNode]:
    """Yield the node and all of its descendants in document order."""
    yield node
    for child in children_of(node):
        yield from walk(child)


def select(node: GenericNode, node_type: str) -> Optional[GenericNode]:
    """Return the first node (the node itself included) of the given type."""
    for candidate in walk(node):
        if candidate.get("type") == node_type:
            return candidate
    return None


def select_all(node: GenericNode, node_type: str) -> list[GenericNode]:
    """Return every node (the node itself included) of the given type."""
    return [candidate for candidate in walk(node) if candidate.get("type") == node_type]


def to_text(node: Optional[GenericNode]) -> str:
    """Concatenate the literal text content of a node."""
    if not node:
        return ""
    value = node.get("value")
    if isinstance(value, str):
        return value
    return "".join(to_text(child) for child in children_of(node))


def is_code_cell(node: GenericNode) -> bool:
    """Check whether a node is a notebook code block."""
    return node.get("type") == "block" and node.get("kind") == NOTEBOOK_CODE_KIND


def text(value: str) -> GenericNode:
    return {"type": "text", "value": value}


def strong_paragraph(children: list[GenericNode]) -> GenericNode:
    """Build a paragraph holding a single strong run, used for degraded titles."""
    return {"type": "paragraph", "children": [{"type": "strong", "children": children}]}
