"""Lift notebook code cells out of exercise and solution blocks.

Gated directive syntax (``{exercise-start}`` ... ``{exercise-end}``) is
parsed into a single exercise or solution node holding everything between
the markers, including notebook code blocks. Those code blocks have to
become top-level units or they would be written as inert text inside a
markdown cell.

The exercise or solution keeps only its first run of non-code content (so
its title and enumerator still render); every code block is promoted to a
top-level sibling and the content between code blocks follows as plain
top-level content.
"""

from myst2ipynb.models import GenericNode
from myst2ipynb.transforms.nodes import children_of, is_code_cell

GATED_TYPES = ("exercise", "solution")


def _has_code_cells(node: GenericNode) -> bool:
    return any(is_code_cell(child) for child in children_of(node))


def _should_lift(node: GenericNode, drop_solutions: bool) -> bool:
    if node.get("type") not in GATED_TYPES:
        return False
    # A dropped solution is removed whole, code cells included
    if node.get("type") == "solution" and drop_solutions:
        return False
    return _has_code_cells(node)


def _split_runs(node: GenericNode) -> tuple[list[GenericNode], list[tuple[GenericNode, list[GenericNode]]]]:
    """Split a node's children around its code cells.

    Returns:
        tuple: The leading run of content, then (code cell, following run)
            pairs in document order.
    """
    leading: list[GenericNode] = []
    segments: list[tuple[GenericNode, list[GenericNode]]] = []
    for child in children_of(node):
        if is_code_cell(child):
            segments.append((child, []))
        elif segments:
            segments[-1][1].append(child)
        else:
            leading.append(child)
    return leading, segments


def _lift_from_block(block: GenericNode, drop_solutions: bool) -> list[GenericNode]:
    """Split a block around the exercises and solutions it contains.

    Content after the last lifted code cell shares a block with the
    siblings that follow the exercise.
    """
    units: list[GenericNode] = []
    segment: list[GenericNode] = []
    first = True

    def flush() -> None:
        nonlocal segment, first
        if not segment:
            return
        # The first segment keeps the block's own attributes
        units.append({**block, "children": segment} if first else {"type": "block", "children": segment})
        segment = []
        first = False

    for child in children_of(block):
        if not _should_lift(child, drop_solutions):
            segment.append(child)
            continue
        leading, segments = _split_runs(child)
        segment.append({**child, "children": leading})
        flush()
        for index, (code_cell, run) in enumerate(segments):
            units.append(code_cell)
            if index == len(segments) - 1:
                segment = list(run)
            elif run:
                units.append({"type": "block", "children": run})

    flush()
    return units


def lift_gated_code_cells(children: list[GenericNode], drop_solutions: bool = False) -> list[GenericNode]:
    """Promote code cells nested in exercises and solutions to the top level.

    Args:
        children: The root node's children
        drop_solutions: Solutions will be dropped later and are left intact

    Returns:
        list: The restructured children, or the ``children`` list itself
            when nothing needed lifting
    """
    lifted: list[GenericNode] = []
    changed = False

    for child in children:
        if _should_lift(child, drop_solutions):
            leading, segments = _split_runs(child)
            lifted.append({**child, "children": leading})
            for code_cell, run in segments:
                lifted.append(code_cell)
                lifted.extend(run)
            changed = True
        elif child.get("type") == "block" and not is_code_cell(child) and any(
            _should_lift(grandchild, drop_solutions) for grandchild in children_of(child)
        ):
            lifted.extend(_lift_from_block(child, drop_solutions))
            changed = True
        else:
            lifted.append(child)

    return lifted if changed else children
