"""Named text templates and the renderer that fills them."""

import logging
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

ALERT_TITLE = "[{ecosystem}] Security Alert: {package} {affected_versions}"

ALERT_BODY = """
Original Alert: [#{number} {title}]({alert_link})

## Description
{description}

## Dependabot error
⚠️**{update_error_title}**

{update_error_body}
"""

# Thanks to https://github.com/markedjs/marked and https://github.com/sindresorhus/github-markdown-css
PREVIEW = """
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <link rel="stylesheet" type="text/css" href="https://cdnjs.cloudflare.com/ajax/libs/github-markdown-css/5.1.0/github-markdown.min.css">
</head>
<body>
  <div class="markdown-body"></div>
  <script src="https://cdn.jsdelivr.net/npm/marked/marked.min.js"></script>
  <script>
    document.getElementsByClassName("markdown-body")[0].innerHTML = marked.parse(`{content}`)
  </script>
</body>
</html>
"""

TEMPLATES: Dict[str, str] = {
    "alert_title": ALERT_TITLE,
    "alert_body": ALERT_BODY,
    "preview": PREVIEW,
}


class TemplateError(ValueError):
    """Raised when a template is unknown, malformed, or references a missing field."""


def _fields(record: Any) -> Mapping[str, Any]:
    if is_dataclass(record) and not isinstance(record, type):
        return asdict(record)
    if isinstance(record, Mapping):
        return record
    raise TemplateError(f"Cannot render fields of {type(record).__name__}")


def render_template(template: str, record: Any, name: str = "inline") -> str:
    """
    Substitute the fields of a record into a template string.

    Args:
        template: Template text using ``{field}`` placeholders
        record: Dataclass instance or mapping supplying the fields
        name: Template name used in error messages

    Returns:
        The rendered string

    Raises:
        TemplateError: If the template is malformed or a field cannot be resolved
    """
    fields = _fields(record)
    try:
        return template.format_map(fields)
    except KeyError as e:
        raise TemplateError(f"Template '{name}' references unknown field {e}") from e
    except (ValueError, IndexError, AttributeError) as e:
        raise TemplateError(f"Template '{name}' is malformed: {e}") from e


def render(name: str, record: Any) -> str:
    """Render the named template with the fields of ``record``."""
    try:
        template = TEMPLATES[name]
    except KeyError:
        raise TemplateError(f"Unknown template: {name}") from None
    logger.debug(f"Rendering template {name}")
    return render_template(template, record, name=name)


def escape_backticks(text: str) -> str:
    """Escape backticks so text can sit inside a JavaScript template literal."""
    return text.replace("`", "\\`")


def unescape_backticks(text: str) -> str:
    """Reverse escape_backticks."""
    return text.replace("\\`", "`")
