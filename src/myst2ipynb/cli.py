"""Command-line interface for myst2ipynb."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from myst2ipynb import Myst2IpynbError, __version__
from myst2ipynb.config import get_config
from myst2ipynb.export.runner import build_export_options, export_document
from myst2ipynb.output.writer import NotebookWriter
from myst2ipynb.parsing.document import DocumentLoader
from myst2ipynb.preview.terminal import NotebookPreview

console = Console()


def setup_logging(level: int | str) -> None:
    """Route myst2ipynb log records to a Rich handler on stderr."""
    logger = logging.getLogger("myst2ipynb")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(level)
    logger.propagate = False


def _log_level(verbose: bool, debug: bool, default: str) -> int | str:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return default


@click.group()
@click.version_option(version=__version__)
def main():
    """myst2ipynb - Export MyST pages as Jupyter notebooks."""
    pass


@main.command()
@click.argument("page", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output notebook path (default: PAGE with an .ipynb suffix)",
)
@click.option(
    "--markdown",
    "-m",
    type=click.Choice(["myst", "commonmark"]),
    default=None,
    help="Markdown flavour for markdown cells (default: from config or myst)",
)
@click.option(
    "--drop-solutions/--keep-solutions",
    default=None,
    help="Drop solution blocks in CommonMark output (default: from config)",
)
@click.option(
    "--images",
    "-i",
    type=click.Choice(["reference", "attachment"]),
    default=None,
    help="Keep image references or embed images as attachments (default: from config)",
)
@click.option(
    "--source-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project source root for /-prefixed image URLs (default: from config)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress")
@click.option("--debug", is_flag=True, help="Log debugging details")
def convert(
    page: Path,
    output: Optional[Path],
    markdown: Optional[str],
    drop_solutions: Optional[bool],
    images: Optional[str],
    source_root: Optional[Path],
    verbose: bool,
    debug: bool,
):
    """Convert a MyST page to a Jupyter notebook.

    PAGE: Path to the page .json written by MyST
    """
    try:
        config = get_config()
        setup_logging(_log_level(verbose, debug, config.log_level))

        # CLI options override config
        export_options = build_export_options(
            output=output or page.with_suffix(".ipynb"),
            markdown=markdown or config.markdown,
            images=images or config.images,
            drop_solutions=config.drop_solutions if drop_solutions is None else drop_solutions,
        )

        document = DocumentLoader().load(page)
        notebook = export_document(
            document,
            export_options,
            source_root=source_root or config.source_root,
        )
        output_path = NotebookWriter().write(notebook, export_options.output)

        attachments = sum(len(cell.attachments or {}) for cell in notebook.markdown_cells)
        console.print(
            Panel.fit(
                f"[green]Success![/green]\n\n"
                f"Notebook: [bold]{len(notebook.code_cells)}[/bold] code cells, "
                f"[bold]{len(notebook.markdown_cells)}[/bold] markdown cells, "
                f"[bold]{attachments}[/bold] attachments\n"
                f"Markdown: [yellow]{export_options.markdown}[/yellow], "
                f"images: [yellow]{export_options.images}[/yellow]\n\n"
                f"Output: [yellow]{output_path}[/yellow]",
                border_style="green",
                title=f"[bold green]{page.name}[/bold green]",
            )
        )

    except Myst2IpynbError as e:
        console.print()
        console.print(
            Panel.fit(
                f"[red]Error:[/red] {str(e)}\n\n"
                f"Check your inputs and try again.",
                border_style="red",
                title="[bold red]Conversion Failed[/bold red]",
            )
        )
        sys.exit(1)


@main.command()
@click.argument("page", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--markdown",
    "-m",
    type=click.Choice(["myst", "commonmark"]),
    default=None,
    help="Markdown flavour for markdown cells (default: from config or myst)",
)
@click.option(
    "--drop-solutions/--keep-solutions",
    default=None,
    help="Drop solution blocks in CommonMark output (default: from config)",
)
def preview(page: Path, markdown: Optional[str], drop_solutions: Optional[bool]):
    """Preview the notebook cells of a MyST page without writing a file."""
    try:
        config = get_config()
        export_options = build_export_options(
            output=page.with_suffix(".ipynb"),
            markdown=markdown or config.markdown,
            drop_solutions=config.drop_solutions if drop_solutions is None else drop_solutions,
        )
        document = DocumentLoader().load(page)
        notebook = export_document(document, export_options)
        NotebookPreview(console).show(notebook, title=document.frontmatter.title or page.name)
    except Myst2IpynbError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@main.command()
def config_show():
    """Show current configuration."""
    try:
        config = get_config()
        console.print(Panel.fit("[bold cyan]myst2ipynb Configuration[/bold cyan]", border_style="cyan"))
        console.print()
        console.print(f"[cyan]Markdown:[/cyan] {config.markdown}")
        console.print(f"[cyan]Images:[/cyan] {config.images}")
        console.print(f"[cyan]Drop Solutions:[/cyan] {config.drop_solutions}")
        console.print(f"[cyan]Source Root:[/cyan] {config.source_root}")
        console.print(f"[cyan]Log Level:[/cyan] {config.log_level}")
    except Exception as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
