"""Collect local image files referenced by a document as base64 data.

This is the filesystem half of attachment embedding: it runs before the
notebook is assembled and produces the URL -> image data map that the
attachment rewriter consumes.
"""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Optional

from myst2ipynb.models import GenericNode, ImageData
from myst2ipynb.transforms.nodes import select_all

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ("http://", "https://", "data:")
DEFAULT_MIME = "application/octet-stream"


def resolve_image_path(url: str, source_file: Path | str, source_root: Path | str) -> Path:
    """Resolve an image URL to a file path.

    Root-relative URLs (``/_static/a.png``) resolve against the project
    source root, all others against the directory of the document.

    Args:
        url: Image URL as written in the document
        source_file: Path of the document referencing the image
        source_root: Project source root

    Returns:
        Path: The image file path
    """
    if url.startswith(("/", "\\")):
        folder = Path(source_root)
    else:
        folder = Path(source_file).parent
    return (folder / url.lstrip("/\\")).resolve()


def guess_mime_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or DEFAULT_MIME


def collect_image_data(
    mdast: GenericNode,
    source_file: Path | str,
    source_root: Optional[Path | str] = None,
) -> dict[str, ImageData]:
    """Read and base64-encode every local image referenced in a tree.

    Remote URLs and data URIs are skipped. Images that cannot be found or
    read are logged and skipped; one bad image never stops the export.

    Args:
        mdast: Document root node
        source_file: Path of the document
        source_root: Project source root (default: the document's directory)

    Returns:
        dict: Image URL, exactly as written in the tree, -> image data
    """
    source_file = Path(source_file)
    source_root = Path(source_root) if source_root is not None else source_file.parent

    image_data: dict[str, ImageData] = {}

    for image in select_all(mdast, "image"):
        url = image.get("url") or image.get("urlSource")
        if not url or not isinstance(url, str) or url.startswith(REMOTE_PREFIXES):
            continue
        if url in image_data:
            continue

        file_path = resolve_image_path(url, source_file, source_root)
        if not file_path.is_file():
            logger.debug("Image not found for attachment embedding: %s", file_path)
            continue

        try:
            content = file_path.read_bytes()
        except OSError as e:
            logger.debug("Failed to read image for attachment %s: %s", file_path, e)
            continue

        image_data[url] = ImageData(
            mime=guess_mime_type(file_path),
            data=base64.b64encode(content).decode("ascii"),
        )

    logger.debug("Collected %d image(s) for attachment embedding", len(image_data))
    return image_data
