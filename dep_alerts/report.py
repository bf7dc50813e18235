"""Filter alerts and format them into markdown drafts."""

import logging
from typing import Iterable, List

from .models import Alert, Draft
from .templates import render

logger = logging.getLogger(__name__)


def should_report(alert: Alert) -> bool:
    """An alert is reported only when its Dependabot update failed with a message."""
    return bool(alert.update_error_body)


def format_alert(alert: Alert) -> Draft:
    """
    Render the issue-style title and markdown body of an alert.

    Raises:
        TemplateError: If a template cannot be rendered
    """
    title = render("alert_title", alert)
    body = render("alert_body", alert)
    return Draft(alert=alert, title=title, body=body)


def build_report(alerts: Iterable[Alert]) -> List[Draft]:
    """Format every alert with a failed update, keeping the input order."""
    drafts = []
    for alert in alerts:
        if not should_report(alert):
            logger.debug(f"Skipping alert #{alert.number}: no update error")
            continue
        drafts.append(format_alert(alert))
        logger.debug(f"Formatted alert #{alert.number}: {alert.update_error_title}")
    return drafts


def join_report(drafts: Iterable[Draft]) -> str:
    return "".join(f"{draft.body}\n" for draft in drafts)
