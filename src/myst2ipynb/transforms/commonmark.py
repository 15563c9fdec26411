"""CommonMark pre-transform for markdown cells.

Replaces MyST-specific nodes with the plain mdast nodes a CommonMark
renderer understands (blockquotes, bold title paragraphs, raw ``$`` math)
so the serialized cell renders in vanilla Jupyter, JupyterLab and Colab.

Each rewrite returns one node, ``None`` to drop the node, or a ``root``
wrapper whose children are spliced into the parent in its place.
"""

from typing import Callable, Optional

from myst2ipynb.models import CommonMarkOptions, GenericNode
from myst2ipynb.transforms.nodes import children_of, select, strong_paragraph, text, to_text

NodeTransform = Callable[[GenericNode, CommonMarkOptions], Optional[GenericNode]]

# Directive-only titles that are turned into bold paragraphs
TITLE_TYPE = "admonitionTitle"


def _capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def _root(children: list[GenericNode]) -> GenericNode:
    return {"type": "root", "children": children}


def _compact(node: GenericNode) -> GenericNode:
    """Drop attributes that are None so they are not serialized."""
    return {key: value for key, value in node.items() if value is not None}


def _caption_content(caption: Optional[GenericNode]) -> list[GenericNode]:
    """Inline content of a caption, with its paragraphs unwrapped."""
    content: list[GenericNode] = []
    for child in children_of(caption) if caption else []:
        if child.get("type") == "paragraph":
            content.extend(children_of(child))
        else:
            content.append(child)
    return content


def _split_title(node: GenericNode, title_type: str = TITLE_TYPE) -> tuple[Optional[GenericNode], list[GenericNode]]:
    children = children_of(node)
    title = next((child for child in children if child.get("type") == title_type), None)
    content = [child for child in children if child.get("type") != title_type]
    return title, content


def transform_admonition(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Admonition -> blockquote starting with its bold title."""
    title, content = _split_title(node)
    title_text = to_text(title) if title else _capitalize(node.get("kind") or "note")
    return {
        "type": "blockquote",
        "children": [strong_paragraph([text(title_text)]), *content],
    }


def transform_math_block(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Math block -> raw ``$$`` block.

    An html node is used because serializers write its value verbatim,
    without escaping the underscores and backslashes of LaTeX.
    """
    value = node.get("value") or ""
    label = node.get("label")
    label_comment = f" ({label})" if label else ""
    return {"type": "html", "value": f"$$\n{value}\n$${label_comment}"}


def transform_inline_math(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Inline math -> raw ``$...$``."""
    return {"type": "html", "value": f"${node.get('value') or ''}$"}


def transform_figure(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Figure -> image, italic caption paragraph, then legend content."""
    image = select(node, "image") or {}
    caption = select(node, "caption")
    legend = select(node, "legend")

    url = image.get("urlSource") or image.get("url") or ""
    alt = image.get("alt") or (to_text(caption) if caption else "")

    children = [_compact({"type": "image", "url": url, "alt": alt, "title": image.get("title")})]

    caption_children = _caption_content(caption)
    if caption_children:
        children.append(
            {
                "type": "paragraph",
                "children": [{"type": "emphasis", "children": caption_children}],
            }
        )

    if legend:
        children.extend(children_of(legend))

    return _root(children)


def transform_table_container(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Table container -> bold caption paragraph and the table itself."""
    caption = select(node, "caption")
    table = select(node, "table")

    children = []
    caption_children = _caption_content(caption)
    if caption_children:
        children.append(strong_paragraph(caption_children))
    if table:
        children.append(table)
    return _root(children)


def transform_code_container(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    code = select(node, "code")
    return transform_code(code, options) if code else node


def transform_exercise(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Exercise -> ``**Exercise N**`` followed by its content."""
    title, content = _split_title(node)
    title_text = to_text(title) if title else "Exercise"
    enumerator = f" {node['enumerator']}" if node.get("enumerator") else ""
    return _root([strong_paragraph([text(f"{title_text}{enumerator}")]), *content])


def transform_solution(node: GenericNode, options: CommonMarkOptions) -> Optional[GenericNode]:
    """Solution -> ``**Solution**`` followed by its content, or nothing."""
    if options.drop_solutions:
        return None
    title, content = _split_title(node)
    title_text = to_text(title) if title else "Solution"
    return _root([strong_paragraph([text(title_text)]), *content])


def transform_proof(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Theorem, lemma, definition, ... -> ``**Kind N (Title)**`` and content."""
    title, content = _split_title(node)
    kind = _capitalize(node.get("kind") or "proof")
    enumerator = f" {node['enumerator']}" if node.get("enumerator") else ""
    title_text = f" ({to_text(title)})" if title else ""
    return _root([strong_paragraph([text(f"{kind}{enumerator}{title_text}")]), *content])


def transform_tab_set(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Tab set -> each tab's bold title followed by its content."""
    children: list[GenericNode] = []
    for item in children_of(node):
        if item.get("type") != "tabItem" and item.get("kind") != "tabItem":
            continue
        if item.get("title"):
            children.append(strong_paragraph([text(item["title"])]))
        children.extend(children_of(item))
    return _root(children)


def transform_card(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Card -> optional bold title and body, without header and footer."""
    title = next((child for child in children_of(node) if child.get("type") == "cardTitle"), None)
    content = [
        child
        for child in children_of(node)
        if child.get("type") not in ("cardTitle", "header", "footer")
    ]

    children: list[GenericNode] = []
    if title:
        children.append(strong_paragraph(children_of(title) or [text(to_text(title))]))
    children.extend(content)
    return _root(children)


def transform_grid(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    # Cards were already converted on the way up
    return _root(children_of(node))


def transform_details(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Details/dropdown -> blockquote titled with its summary."""
    title, content = _split_title(node, "summary")
    title_text = to_text(title) if title else "Details"
    return {
        "type": "blockquote",
        "children": [strong_paragraph([text(title_text)]), *content],
    }


def transform_aside(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Aside/sidebar/margin -> blockquote with an optional bold title."""
    title, content = _split_title(node)
    children: list[GenericNode] = []
    if title:
        children.append(strong_paragraph(children_of(title)))
    children.extend(content)
    return {"type": "blockquote", "children": children}


def transform_code(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Code -> fenced code with only ``lang`` and ``value``.

    Options such as class or emphasize-lines would otherwise make the
    serializer write a ``{code-block}`` directive.
    """
    return _compact({"type": "code", "lang": node.get("lang"), "value": node.get("value") or ""})


def transform_image(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Image -> plain ``![alt](url)`` image without class, width or align."""
    return _compact(
        {
            "type": "image",
            "url": node.get("url") or node.get("urlSource") or "",
            "alt": node.get("alt") or "",
            "title": node.get("title"),
        }
    )


def transform_include(node: GenericNode, options: CommonMarkOptions) -> Optional[GenericNode]:
    # Include content is already resolved into the children
    children = children_of(node)
    return _root(children) if children else None


def transform_myst_directive(node: GenericNode, options: CommonMarkOptions) -> Optional[GenericNode]:
    """Unresolved directive -> its children, a code block of its raw value, or nothing."""
    children = children_of(node)
    if children:
        return _root(children)
    if node.get("value"):
        return {"type": "code", "lang": node.get("lang") or "", "value": node["value"]}
    return None


def transform_myst_role(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    """Unresolved role -> its children or its raw value as text."""
    children = children_of(node)
    if children:
        return _root(children)
    return text(node.get("value") or "")


def drop(node: GenericNode, options: CommonMarkOptions) -> None:
    return None


def pass_through(node: GenericNode, options: CommonMarkOptions) -> GenericNode:
    return node


CONTAINER_TRANSFORMS: dict[str, NodeTransform] = {
    "figure": transform_figure,
    "table": transform_table_container,
    "code": transform_code_container,
}


def transform_container(node: GenericNode, options: CommonMarkOptions) -> Optional[GenericNode]:
    return CONTAINER_TRANSFORMS.get(node.get("kind"), pass_through)(node, options)


NODE_TRANSFORMS: dict[str, NodeTransform] = {
    "admonition": transform_admonition,
    "math": transform_math_block,
    "inlineMath": transform_inline_math,
    "container": transform_container,
    "exercise": transform_exercise,
    "solution": transform_solution,
    "proof": transform_proof,
    "tabSet": transform_tab_set,
    "card": transform_card,
    "grid": transform_grid,
    "details": transform_details,
    "aside": transform_aside,
    "include": transform_include,
    "mystDirective": transform_myst_directive,
    "mystRole": transform_myst_role,
    "mystTarget": drop,
    "comment": drop,
    "code": transform_code,
    "image": transform_image,
}


def transform_node(node: GenericNode, options: CommonMarkOptions) -> Optional[GenericNode]:
    """Rewrite a single node; unknown node types are returned unchanged."""
    return NODE_TRANSFORMS.get(node.get("type"), pass_through)(node, options)


def transform_to_commonmark(
    tree: GenericNode,
    options: Optional[CommonMarkOptions] = None,
) -> GenericNode:
    """Replace MyST-specific nodes in a tree with CommonMark equivalents.

    Children are converted before their parent, so a parent's rewrite
    always sees normalized content. The tree is modified in place; callers
    that need the original must pass a copy.

    Args:
        tree: Root of the subtree to convert
        options: Conversion options

    Returns:
        GenericNode: The converted tree
    """
    options = options or CommonMarkOptions()

    if not isinstance(tree.get("children"), list):
        return tree

    converted: list[GenericNode] = []
    for child in children_of(tree):
        replacement = transform_node(transform_to_commonmark(child, options), options)
        if replacement is None:
            continue
        if replacement.get("type") == "root" and isinstance(replacement.get("children"), list):
            converted.extend(children_of(replacement))
        else:
            converted.append(replacement)
    tree["children"] = converted

    # Labels were consumed by the rewrites above; left in place they would be
    # written as "(label)=" targets in front of headings and paragraphs.
    for child in converted:
        child.pop("identifier", None)
        child.pop("label", None)

    return tree
