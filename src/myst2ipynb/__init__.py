"""myst2ipynb - Export MyST documents as Jupyter notebooks.

Code cells become executable notebook cells, prose becomes markdown cells
written either in MyST or in plain CommonMark.
"""

__version__ = "0.1.0"


class Myst2IpynbError(Exception):
    """Base exception for all myst2ipynb errors."""

    pass


class DocumentLoadError(Myst2IpynbError):
    """Raised when a MyST page cannot be loaded."""

    pass


class ConfigurationError(Myst2IpynbError):
    """Raised when configuration or export options are invalid."""

    pass


class ExportError(Myst2IpynbError):
    """Raised when writing the notebook fails."""

    pass
