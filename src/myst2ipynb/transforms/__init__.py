"""Pure tree and string transforms used by the notebook export."""

from myst2ipynb.transforms.attachments import embed_images_as_attachments
from myst2ipynb.transforms.commonmark import transform_to_commonmark
from myst2ipynb.transforms.gated import lift_gated_code_cells

__all__ = [
    "embed_images_as_attachments",
    "transform_to_commonmark",
    "lift_gated_code_cells",
]
