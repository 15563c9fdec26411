"""Option and frontmatter models for notebook export."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MarkdownFormat = Literal["myst", "commonmark"]
ImageMode = Literal["reference", "attachment"]


class ImageData(BaseModel):
    """Base64 image payload for a single image URL.

    Attributes:
        mime: MIME type (e.g. image/png)
        data: Base64-encoded file content
    """

    mime: str
    data: str

    model_config = ConfigDict(frozen=True)


class CommonMarkOptions(BaseModel):
    """Options for the CommonMark conversion.

    Attributes:
        drop_solutions: Remove solution blocks from the output
    """

    drop_solutions: bool = False


class IpynbOptions(BaseModel):
    """Options controlling how a document tree becomes a notebook.

    Attributes:
        markdown: Keep MyST syntax in markdown cells, or degrade to CommonMark
        commonmark: Options for the CommonMark conversion
        images: Leave images as references or embed them as cell attachments
        image_data: Image URL -> payload, used when images is "attachment"
    """

    markdown: MarkdownFormat = "myst"
    commonmark: CommonMarkOptions = Field(default_factory=CommonMarkOptions)
    images: ImageMode = "reference"
    image_data: dict[str, ImageData] = Field(default_factory=dict)

    @property
    def drops_solutions(self) -> bool:
        """Solutions are only dropped by the CommonMark conversion."""
        return self.markdown == "commonmark" and self.commonmark.drop_solutions


class Kernelspec(BaseModel):
    """Kernel specification from page frontmatter."""

    name: Optional[str] = None
    display_name: Optional[str] = None
    language: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class PageFrontmatter(BaseModel):
    """The subset of MyST page frontmatter used by the exporter.

    Unknown frontmatter keys are kept.
    """

    title: Optional[str] = None
    kernelspec: Optional[Kernelspec] = None

    model_config = ConfigDict(extra="allow")


class ExportOptions(BaseModel):
    """A single ipynb export as configured in frontmatter or on the command line.

    Attributes:
        format: Export format, always ipynb
        output: Path of the notebook to write
        markdown: Markdown flavour for prose cells
        images: Image handling mode
        drop_solutions: Drop solutions when converting to CommonMark
    """

    format: Literal["ipynb"] = "ipynb"
    output: Path
    markdown: MarkdownFormat = "myst"
    images: ImageMode = "reference"
    drop_solutions: bool = False

    def to_ipynb_options(self) -> IpynbOptions:
        return IpynbOptions(
            markdown=self.markdown,
            commonmark=CommonMarkOptions(drop_solutions=self.drop_solutions),
            images=self.images,
        )
