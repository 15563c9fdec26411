"""Terminal preview for exported notebooks using Rich."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from myst2ipynb.models import CodeCell, MarkdownCell, NotebookDocument


class NotebookPreview:
    """Show an assembled notebook in the terminal."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize terminal preview.

        Args:
            console: Rich console to use (creates new if None)
        """
        self.console = console or Console()

    def show(self, notebook: NotebookDocument, title: str = "Notebook") -> None:
        """Print every cell followed by a summary table.

        Args:
            notebook: Notebook to preview
            title: Panel title
        """
        language = notebook.metadata.get("language_info", {}).get("name", "python")

        self.console.print()
        self.console.print(
            Panel.fit(
                f"[bold cyan]{title}[/bold cyan]\n\n"
                f"Cells: [bold]{len(notebook.cells)}[/bold] "
                f"([bold]{len(notebook.code_cells)}[/bold] code, "
                f"[bold]{len(notebook.markdown_cells)}[/bold] markdown)\n"
                f"Language: [dim]{language}[/dim]",
                border_style="cyan",
            )
        )

        for index, cell in enumerate(notebook.cells, start=1):
            self._show_cell(cell, index, language)

        self._show_summary(notebook)

    def _show_cell(self, cell: CodeCell | MarkdownCell, index: int, language: str) -> None:
        source = "".join(cell.source)
        if isinstance(cell, CodeCell):
            body = Syntax(source, language, theme="ansi_dark", word_wrap=True)
            self.console.print(Panel(body, title=f"[bold green][{index}] code[/bold green]", title_align="left", border_style="green"))
            return

        subtitle = None
        if cell.attachments:
            subtitle = f"[dim]{len(cell.attachments)} attachment(s)[/dim]"
        self.console.print(
            Panel(
                Text(source),
                title=f"[bold blue][{index}] markdown[/bold blue]",
                title_align="left",
                subtitle=subtitle,
                border_style="blue",
            )
        )

    def _show_summary(self, notebook: NotebookDocument) -> None:
        table = Table(title="Summary", show_header=True, header_style="bold")
        table.add_column("Cell type")
        table.add_column("Count", justify="right")
        table.add_column("Lines", justify="right")

        for label, cells in (("code", notebook.code_cells), ("markdown", notebook.markdown_cells)):
            table.add_row(label, str(len(cells)), str(sum(len(cell.source) for cell in cells)))

        attachments = sum(len(cell.attachments or {}) for cell in notebook.markdown_cells)
        table.add_row("attachments", str(attachments), "-")

        self.console.print()
        self.console.print(table)
