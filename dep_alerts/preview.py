"""Render the report into a static HTML preview page."""

import logging
from pathlib import Path
from typing import Union

from .templates import escape_backticks, render

logger = logging.getLogger(__name__)


def render_preview(content: str) -> str:
    """
    Embed markdown content in the preview HTML shell.

    The content is placed in a JavaScript template literal, so backticks are
    escaped. ``</script>`` sequences are left as-is.
    """
    return render("preview", {"content": escape_backticks(content)})


def write_preview(path: Union[str, Path], content: str) -> Path:
    """Render the preview page and write it to ``path``."""
    html = render_preview(content)
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(html)
    logger.info(f"Wrote preview to {output_path}")
    return output_path
