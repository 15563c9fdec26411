"""Output writing for exported notebooks."""

from pathlib import Path

import nbformat

from myst2ipynb import ExportError
from myst2ipynb.export.ipynb import to_notebook_node
from myst2ipynb.models import NotebookDocument


class NotebookWriter:
    """Write assembled notebooks as .ipynb files.

    Serialization goes through nbformat, so files use Jupyter's own JSON
    layout.
    """

    def dumps(self, notebook: NotebookDocument) -> str:
        """Serialize a notebook to .ipynb JSON text.

        Args:
            notebook: Notebook to serialize

        Returns:
            str: Notebook JSON
        """
        return nbformat.writes(to_notebook_node(notebook))

    def write(self, notebook: NotebookDocument, output_path: Path | str) -> Path:
        """Write a notebook to a file.

        Args:
            notebook: Notebook to write
            output_path: Path to output file

        Returns:
            Path: Path to written file

        Raises:
            ExportError: If the file cannot be written
        """
        output_path = Path(output_path)

        try:
            # Ensure parent directory exists
            output_path.parent.mkdir(parents=True, exist_ok=True)

            with open(output_path, "w", encoding="utf-8") as f:
                nbformat.write(to_notebook_node(notebook), f)
        except OSError as e:
            raise ExportError(f"Failed to write notebook {output_path}: {e}") from e

        return output_path
