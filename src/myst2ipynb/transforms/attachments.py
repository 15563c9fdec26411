"""Image attachment embedding for notebook markdown cells.

Markdown image references ``![alt](url)`` whose URL has collected image
data are rewritten to ``![alt](attachment:name)`` and the base64 payload is
returned as the cell's ``attachments`` mapping.

This runs on the markdown string after serialization. The tree transforms
stay free of filesystem access and of notebook cell structure; only this
pass knows about the attachment syntax.
"""

import re
from typing import Mapping, NamedTuple, Optional

from myst2ipynb.models import ImageData

# ![alt](url), ![alt](<url>) and either with a "title". Escaped \], \) and
# \> are tried before the single-character alternatives so they are
# consumed as pairs.
IMAGE_PATTERN = re.compile(
    r'!\[((?:\\\]|[^\]])*)\]\('
    r'(?:<((?:\\>|[^>\n])*)>|((?:\\\)|[^)\s])+))'
    r'(?:\s+"[^"]*")?\)'
)

# Backslash escapes the serializer may have added inside a destination
ESCAPED_PUNCTUATION = re.compile(r"\\([()\[\]<>])")
WHITESPACE = re.compile(r"\s+")

Attachments = dict[str, dict[str, str]]


class EmbedResult(NamedTuple):
    """Rewritten markdown plus the attachments it now references."""

    md: str
    attachments: Optional[Attachments] = None


def attachment_basename(url: str) -> str:
    """Return the final path segment of a URL, without query or fragment.

    Whitespace becomes ``_`` so the name is a valid bare link destination.
    """
    clean = url.split("?")[0].split("#")[0]
    return WHITESPACE.sub("_", clean.split("/")[-1].strip()) or "image"


def unique_attachment_name(base: str, used: set[str]) -> str:
    """Pick a name for ``base`` that is not in ``used``.

    Collisions get ``_1``, ``_2``, ... inserted before the extension, or
    appended when there is none.
    """
    name = base
    counter = 1
    while name in used:
        dot = base.rfind(".")
        if dot >= 0:
            name = f"{base[:dot]}_{counter}{base[dot:]}"
        else:
            name = f"{base}_{counter}"
        counter += 1
    return name


def embed_images_as_attachments(
    md: str,
    image_data: Mapping[str, ImageData],
) -> EmbedResult:
    """Rewrite image references in a markdown string to cell attachments.

    Args:
        md: Serialized markdown for one cell
        image_data: Image URL -> payload

    Returns:
        EmbedResult: The rewritten markdown and the attachments mapping.
            The attachments are None (never an empty dict) when nothing matched.
    """
    if not image_data:
        return EmbedResult(md)

    attachments: Attachments = {}
    used_names: set[str] = set()
    # A URL referenced twice in one cell shares one attachment
    names_by_url: dict[str, str] = {}

    def replace(match: re.Match) -> str:
        alt = match.group(1)
        url = match.group(2) if match.group(2) is not None else match.group(3)
        unescaped_url = ESCAPED_PUNCTUATION.sub(r"\1", url)

        data = image_data.get(unescaped_url)
        if data is None:
            return match.group(0)

        name = names_by_url.get(unescaped_url)
        if name is None:
            name = unique_attachment_name(attachment_basename(unescaped_url), used_names)
            used_names.add(name)
            names_by_url[unescaped_url] = name
            attachments[name] = {data.mime: data.data}

        return f"![{alt}](attachment:{name})"

    updated = IMAGE_PATTERN.sub(replace, md)

    if attachments:
        return EmbedResult(updated, attachments)
    return EmbedResult(md)
