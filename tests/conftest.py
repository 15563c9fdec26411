"""Pytest configuration and fixtures."""

import logging

import pytest

from myst2ipynb.config import reset_config


@pytest.fixture(autouse=True)
def reset_config_after_test():
    """Reset global config after each test."""
    yield
    reset_config()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo the CLI's logging setup so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("myst2ipynb")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sample_page_data():
    """Sample MyST page JSON for testing."""
    return {
        "kind": "Article",
        "location": "/chapter/intro.md",
        "frontmatter": {
            "title": "Linear Regression",
            "kernelspec": {
                "name": "python3",
                "display_name": "Python 3",
                "language": "python",
            },
        },
        "mdast": {
            "type": "root",
            "children": [
                {
                    "type": "block",
                    "children": [
                        {
                            "type": "heading",
                            "depth": 1,
                            "identifier": "linear-regression",
                            "label": "Linear Regression",
                            "implicit": True,
                            "children": [{"type": "text", "value": "Linear Regression"}],
                        },
                        {
                            "type": "paragraph",
                            "children": [
                                {"type": "text", "value": "The model is "},
                                {"type": "inlineMath", "value": "y = wx + b"},
                            ],
                        },
                        {
                            "type": "image",
                            "url": "/_static/fit.png",
                            "alt": "Fitted line",
                        },
                    ],
                },
                {
                    "type": "block",
                    "kind": "notebook-code",
                    "children": [
                        {
                            "type": "code",
                            "lang": "python",
                            "executable": True,
                            "value": "import numpy as np\nx = np.linspace(0, 10, 100)",
                        },
                        {"type": "outputs", "children": []},
                    ],
                },
                {
                    "type": "block",
                    "children": [
                        {
                            "type": "admonition",
                            "kind": "note",
                            "children": [
                                {"type": "paragraph", "children": [{"type": "text", "value": "Least squares has a closed form."}]},
                            ],
                        },
                        {"type": "mystTarget", "label": "end"},
                    ],
                },
            ],
        },
    }


@pytest.fixture
def sample_project(tmp_path, sample_page_data):
    """A project directory with a page JSON, its source file and a static image."""
    import json

    (tmp_path / "chapter").mkdir()
    (tmp_path / "chapter" / "intro.md").write_text("# Linear Regression\n", encoding="utf-8")
    (tmp_path / "_static").mkdir()
    (tmp_path / "_static" / "fit.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")

    page = tmp_path / "_build" / "intro.json"
    page.parent.mkdir()
    page.write_text(json.dumps(sample_page_data), encoding="utf-8")
    return tmp_path
