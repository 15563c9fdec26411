"""Markdown serialization of MyST trees.

Generic mdast nodes are written as CommonMark (with GFM tables); MyST
nodes that survive into the tree are written in MyST directive and role
syntax. Any callable with the ``MarkdownSerializer`` signature can be used
by the exporter in place of ``write_md``.
"""

import json
import re
from typing import Callable, Optional, Protocol

from myst2ipynb.models import GenericNode
from myst2ipynb.transforms.nodes import children_of, to_text

DiagnosticSink = Callable[[str], None]

BLOCK_MARKER = "+++"

BLOCK_TYPES = {
    "root",
    "block",
    "paragraph",
    "heading",
    "thematicBreak",
    "blockquote",
    "list",
    "listItem",
    "code",
    "table",
    "math",
    "admonition",
    "container",
    "exercise",
    "solution",
    "proof",
    "tabSet",
    "tabItem",
    "card",
    "grid",
    "details",
    "aside",
    "mystTarget",
    "comment",
    "mystDirective",
    "include",
    "footnoteDefinition",
}

# Attributes that only a directive can express
CODE_DIRECTIVE_ATTRIBUTES = ("class", "emphasizeLines", "showLineNumbers", "startingLineNumber", "filename", "identifier", "label")
IMAGE_DIRECTIVE_ATTRIBUTES = ("class", "width", "height", "align")

TEXT_ESCAPES = re.compile(r"([\\*`\[\]])|(?<!\w)_|_(?!\w)")
# Block syntax that only has meaning at the start of a line, "+++" block markers included
LINE_START_ESCAPES = re.compile(
    r"^([ \t]{0,3})(?:([#>%])|([-+=])(?=[-+=\s]|$)|(~)(?=~~)|(:)(?=::)|(\d+)(?=[.)](?:\s|$)))",
    re.MULTILINE,
)
DESTINATION_ESCAPES = re.compile(r"([()])")
ANGLE_DESTINATION_ESCAPES = re.compile(r"([<>])")
COLON_FENCE = re.compile(r"^(:{3,})", re.MULTILINE)
BACKTICK_RUN = re.compile(r"`+")


class MarkdownSerializer(Protocol):
    """Callable turning a tree into a markdown string."""

    def __call__(self, tree: GenericNode, diagnostics: Optional[DiagnosticSink] = None) -> str: ...


def _escape_line_start(match: re.Match) -> str:
    indent, digits = match.group(1), match.group(6)
    if digits is not None:
        return f"{indent}{digits}\\"
    return f"{indent}\\{match.group(0)[len(indent):]}"


def escape_text(value: str) -> str:
    """Escape text so no part of it is read as markdown syntax."""
    value = TEXT_ESCAPES.sub(lambda match: "\\" + match.group(0), value)
    return LINE_START_ESCAPES.sub(_escape_line_start, value)


def escape_destination(url: str) -> str:
    """Escape a link or image URL.

    URLs containing whitespace are only valid in ``<...>`` form.
    """
    if any(char.isspace() for char in url):
        return "<" + ANGLE_DESTINATION_ESCAPES.sub(r"\\\1", url) + ">"
    return DESTINATION_ESCAPES.sub(r"\\\1", url)


def _indent(value: str, prefix: str, first: Optional[str] = None) -> str:
    lines = value.split("\n")
    head = (first if first is not None else prefix) + lines[0]
    rest = [prefix + line if line else "" for line in lines[1:]]
    return "\n".join([head, *rest])


class MarkdownWriter:
    """Write a MyST tree as markdown.

    Args:
        diagnostics: Receives a message for every cross-reference that
            cannot be given a URL; when None such references are written
            silently with an empty URL.
    """

    def __init__(self, diagnostics: Optional[DiagnosticSink] = None):
        self.diagnostics = diagnostics
        self.handlers: dict[str, Callable[[GenericNode], str]] = {
            "root": self.root,
            "block": self.block,
            "paragraph": self.labelled(self.paragraph),
            "heading": self.labelled(self.heading),
            "blockquote": self.labelled(self.blockquote),
            "list": self.labelled(self.list_block),
            "listItem": self.list_item,
            "thematicBreak": lambda node: "---",
            "code": self.code,
            "html": lambda node: node.get("value") or "",
            "text": lambda node: escape_text(node.get("value") or ""),
            "emphasis": lambda node: f"*{self.inline(node)}*",
            "strong": lambda node: f"**{self.inline(node)}**",
            "inlineCode": self.inline_code,
            "break": lambda node: "\\\n",
            "link": self.link,
            "image": self.image,
            "crossReference": self.cross_reference,
            "table": self.table,
            "footnoteReference": lambda node: f"[^{node.get('label') or node.get('identifier') or ''}]",
            "footnoteDefinition": self.footnote_definition,
            "math": self.math,
            "inlineMath": lambda node: f"{{math}}`{node.get('value') or ''}`",
            "mystTarget": lambda node: f"({node.get('label') or ''})=",
            "comment": self.comment,
            "admonition": self.admonition,
            "admonitionTitle": self.inline,
            "container": self.container,
            "caption": self.blocks,
            "legend": self.blocks,
            "exercise": self.exercise,
            "solution": self.solution,
            "proof": self.proof,
            "tabSet": lambda node: self.directive("tab-set", "", {}, self.blocks(node)),
            "tabItem": lambda node: self.directive("tab-item", node.get("title") or "", {}, self.blocks(node)),
            "card": self.card,
            "grid": lambda node: self.directive("grid", "", {}, self.blocks(node)),
            "details": self.details,
            "aside": self.aside,
            "mystDirective": self.myst_directive,
            "mystRole": lambda node: f"{{{node.get('name') or ''}}}`{node.get('value') or ''}`",
            "include": self.blocks,
        }

    def write(self, node: GenericNode) -> str:
        return self.render(node).strip("\n")

    def render(self, node: GenericNode) -> str:
        handler = self.handlers.get(node.get("type"))
        if handler:
            return handler(node)
        return self.unknown(node)

    def unknown(self, node: GenericNode) -> str:
        children = children_of(node)
        if children:
            if any(child.get("type") in BLOCK_TYPES for child in children):
                return self.blocks(node)
            return self.inline(node)
        value = node.get("value")
        return value if isinstance(value, str) else ""

    # Containers

    def blocks(self, node: GenericNode) -> str:
        rendered = (self.render(child) for child in children_of(node))
        return "\n\n".join(part for part in rendered if part)

    def inline(self, node: GenericNode) -> str:
        return "".join(self.render(child) for child in children_of(node))

    def labelled(self, handler: Callable[[GenericNode], str]) -> Callable[[GenericNode], str]:
        """Prefix a node carrying a label with its ``(label)=`` target."""

        def wrapper(node: GenericNode) -> str:
            label = node.get("identifier") or node.get("label")
            prefix = f"({label})=\n" if label and not node.get("implicit") else ""
            return prefix + handler(node)

        return wrapper

    # CommonMark

    def root(self, node: GenericNode) -> str:
        return self.blocks(node)

    def block(self, node: GenericNode) -> str:
        meta = node.get("meta")
        if isinstance(meta, dict):
            meta = json.dumps(meta)
        marker = f"{BLOCK_MARKER} {meta}" if meta else BLOCK_MARKER
        content = self.blocks(node)
        return f"{marker}\n{content}" if content else marker

    def paragraph(self, node: GenericNode) -> str:
        return self.inline(node)

    def heading(self, node: GenericNode) -> str:
        depth = min(max(int(node.get("depth") or 1), 1), 6)
        return f"{'#' * depth} {self.inline(node)}"

    def blockquote(self, node: GenericNode) -> str:
        content = self.blocks(node)
        return "\n".join(f"> {line}" if line else ">" for line in content.split("\n"))

    def list_block(self, node: GenericNode) -> str:
        ordered = bool(node.get("ordered"))
        start = node.get("start") or 1
        items = []
        for index, item in enumerate(children_of(node)):
            marker = f"{start + index}. " if ordered else "- "
            items.append(self.list_item(item, marker))
        return ("\n\n" if node.get("spread") else "\n").join(items)

    def list_item(self, node: GenericNode, marker: str = "- ") -> str:
        if node.get("checked") is not None:
            marker += "[x] " if node.get("checked") else "[ ] "
        content = self.blocks(node) if any(child.get("type") in BLOCK_TYPES for child in children_of(node)) else self.inline(node)
        return _indent(content, " " * len(marker), first=marker)

    def code(self, node: GenericNode) -> str:
        value = node.get("value") or ""
        lang = node.get("lang") or ""
        fence = self._fence(value, "`")
        if any(node.get(attribute) for attribute in CODE_DIRECTIVE_ATTRIBUTES):
            options = {
                "name": node.get("identifier") or node.get("label"),
                "class": " ".join(node["class"]) if isinstance(node.get("class"), list) else node.get("class"),
                "linenos": node.get("showLineNumbers"),
                "lineno-start": node.get("startingLineNumber"),
                "emphasize-lines": ", ".join(str(line) for line in node.get("emphasizeLines") or []),
                "filename": node.get("filename"),
            }
            return self.directive("code-block", lang, options, value, fence=fence)
        info = f"{lang} {node['meta']}" if node.get("meta") else lang
        return f"{fence}{info}\n{value}\n{fence}"

    def inline_code(self, node: GenericNode) -> str:
        value = node.get("value") or ""
        ticks = "`" * (max((len(run) for run in BACKTICK_RUN.findall(value)), default=0) + 1)
        padding = " " if value.startswith("`") or value.endswith("`") else ""
        return f"{ticks}{padding}{value}{padding}{ticks}"

    def link(self, node: GenericNode) -> str:
        title = f' "{node["title"]}"' if node.get("title") else ""
        return f"[{self.inline(node)}]({escape_destination(node.get('url') or '')}{title})"

    def image(self, node: GenericNode) -> str:
        url = node.get("url") or node.get("urlSource") or ""
        alt = node.get("alt") or ""
        if any(node.get(attribute) for attribute in IMAGE_DIRECTIVE_ATTRIBUTES):
            options = {
                "alt": alt,
                "width": node.get("width"),
                "height": node.get("height"),
                "align": node.get("align"),
                "class": " ".join(node["class"]) if isinstance(node.get("class"), list) else node.get("class"),
            }
            return self.directive("image", url, options, "", fence="```")
        title = f' "{node["title"]}"' if node.get("title") else ""
        return f"![{escape_text(alt)}]({escape_destination(url)}{title})"

    def cross_reference(self, node: GenericNode) -> str:
        url = node.get("urlSource")
        if not url:
            for key, prefix in (("label", "#"), ("identifier", "#"), ("html_id", "#"), ("url", "")):
                if node.get(key):
                    url = f"{prefix}{node[key]}"
                    break
        if not url and self.diagnostics is not None:
            self.diagnostics(
                "crossReference has no URL "
                f"(identifier={node.get('identifier')!r}, label={node.get('label')!r}, "
                f"kind={node.get('kind')!r}, text={to_text(node)[:80]!r})"
            )
        return self.link({**node, "url": url or ""})

    def table(self, node: GenericNode) -> str:
        rows = [
            [self.inline(cell).replace("|", "\\|").replace("\n", " ") for cell in children_of(row)]
            for row in children_of(node)
        ]
        if not rows:
            return ""
        width = max(len(row) for row in rows)
        rows = [row + [""] * (width - len(row)) for row in rows]
        align = list(node.get("align") or [])
        align += [None] * (width - len(align))
        delimiters = {"left": ":--", "right": "--:", "center": ":-:"}
        lines = [f"| {' | '.join(rows[0])} |", f"| {' | '.join(delimiters.get(a, '---') for a in align[:width])} |"]
        lines.extend(f"| {' | '.join(row)} |" for row in rows[1:])
        return "\n".join(lines)

    def footnote_definition(self, node: GenericNode) -> str:
        label = node.get("label") or node.get("identifier") or ""
        return _indent(self.blocks(node), "    ", first=f"[^{label}]: ")

    # MyST

    def math(self, node: GenericNode) -> str:
        value = node.get("value") or ""
        label = node.get("label") or node.get("identifier")
        if label:
            return self.directive("math", "", {"label": label}, value, fence="```")
        return f"$$\n{value}\n$$"

    def comment(self, node: GenericNode) -> str:
        return "\n".join(f"% {line}" if line else "%" for line in (node.get("value") or "").split("\n"))

    def admonition(self, node: GenericNode) -> str:
        title, body = self._titled(node)
        kind = node.get("kind") or "note"
        if kind == "admonition" and not title:
            title = "Note"
        return self.directive(kind, title, self._label_option(node), body)

    def container(self, node: GenericNode) -> str:
        kind = node.get("kind")
        options = self._label_option(node)
        caption = next((child for child in children_of(node) if child.get("type") == "caption"), None)
        legend = next((child for child in children_of(node) if child.get("type") == "legend"), None)
        if kind == "figure":
            image = next((child for child in children_of(node) if child.get("type") == "image"), {})
            options["alt"] = image.get("alt")
            options["width"] = image.get("width")
            body = "\n\n".join(part for part in (self.blocks(caption or {}), self.blocks(legend or {})) if part)
            return self.directive("figure", image.get("urlSource") or image.get("url") or "", options, body)
        if kind == "table":
            tables = [child for child in children_of(node) if child.get("type") != "caption"]
            body = "\n\n".join(self.render(child) for child in tables)
            return self.directive("table", to_text(caption) if caption else "", options, body)
        return self.blocks(node)

    def exercise(self, node: GenericNode) -> str:
        title, body = self._titled(node)
        return self.directive("exercise", title, self._label_option(node), body)

    def solution(self, node: GenericNode) -> str:
        title, body = self._titled(node)
        return self.directive("solution", node.get("target") or title, self._label_option(node), body)

    def proof(self, node: GenericNode) -> str:
        title, body = self._titled(node)
        return self.directive(f"prf:{node.get('kind') or 'proof'}", title, self._label_option(node), body)

    def card(self, node: GenericNode) -> str:
        title = next((child for child in children_of(node) if child.get("type") == "cardTitle"), None)
        content = {"children": [child for child in children_of(node) if child.get("type") != "cardTitle"]}
        return self.directive("card", self.inline(title) if title else "", {}, self.blocks(content))

    def details(self, node: GenericNode) -> str:
        summary = next((child for child in children_of(node) if child.get("type") == "summary"), None)
        content = {"children": [child for child in children_of(node) if child.get("type") != "summary"]}
        return self.directive("dropdown", self.inline(summary) if summary else "", {}, self.blocks(content))

    def aside(self, node: GenericNode) -> str:
        title, body = self._titled(node)
        return self.directive(node.get("kind") or "aside", title, {}, body)

    def myst_directive(self, node: GenericNode) -> str:
        options = {key: str(value) for key, value in (node.get("options") or {}).items()}
        body = node.get("value") or self.blocks(node)
        return self.directive(node.get("name") or "", node.get("args") or "", options, body, fence="```")

    # Helpers

    def directive(
        self,
        name: str,
        argument: str,
        options: dict,
        body: str,
        fence: Optional[str] = None,
    ) -> str:
        """Write a fenced directive; colon fences grow to enclose nested ones."""
        if fence is None:
            longest = max((len(run) for run in COLON_FENCE.findall(body)), default=2)
            fence = ":" * max(3, longest + 1)
        opening = f"{fence}{{{name}}} {argument}".rstrip()
        lines = [opening]
        lines.extend(f":{key}: {value}".rstrip() for key, value in options.items() if value not in (None, "", False))
        if body:
            if len(lines) > 1:
                lines.append("")
            lines.append(body)
        lines.append(fence)
        return "\n".join(lines)

    def _titled(self, node: GenericNode) -> tuple[str, str]:
        title = next((child for child in children_of(node) if child.get("type") == "admonitionTitle"), None)
        content = {"children": [child for child in children_of(node) if child.get("type") != "admonitionTitle"]}
        return (self.inline(title) if title else ""), self.blocks(content)

    def _label_option(self, node: GenericNode) -> dict:
        label = node.get("label") or node.get("identifier")
        return {"label": label} if label else {}

    def _fence(self, value: str, char: str) -> str:
        longest = max((len(run) for run in re.findall(f"{re.escape(char)}{{3,}}", value)), default=2)
        return char * max(3, longest + 1)


def write_md(tree: GenericNode, diagnostics: Optional[DiagnosticSink] = None) -> str:
    """Serialize a tree to markdown.

    Args:
        tree: Root of the tree to write
        diagnostics: Optional sink for messages about unresolvable references

    Returns:
        str: Markdown text without a trailing newline
    """
    return MarkdownWriter(diagnostics).write(tree)
