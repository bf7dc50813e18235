"""Map raw GraphQL vulnerabilityAlerts nodes onto Alert records."""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from dateutil import parser as date_parser

from .models import Alert

logger = logging.getLogger(__name__)


def parse_date(date_str: Optional[str]) -> Optional[datetime]:
    """Parse a GraphQL DateTime string, or return None if absent or invalid."""
    if not date_str:
        return None
    try:
        return date_parser.isoparse(date_str)
    except (ValueError, TypeError, OverflowError) as e:
        logger.warning(f"Failed to parse date '{date_str}': {e}")
        return None


def alert_link(repository_url: str, number: int) -> str:
    """Web link of a Dependabot alert."""
    return f"{repository_url}/security/dependabot/{number}"


def _obj(value: Any) -> Dict[str, Any]:
    # GraphQL returns null for absent objects
    return value if isinstance(value, dict) else {}


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def map_alert(raw: Dict[str, Any], repository_url: str) -> Alert:
    """
    Flatten one vulnerabilityAlerts node into an Alert.

    Absent or null nested objects become empty strings, so a node without a
    dependabotUpdate error maps to an alert with an empty update_error_body.
    """
    raw = _obj(raw)
    update_error = _obj(_obj(raw.get("dependabotUpdate")).get("error"))
    advisory = _obj(raw.get("securityAdvisory"))
    vulnerability = _obj(raw.get("securityVulnerability"))
    package = _obj(vulnerability.get("package"))

    number = raw.get("number")
    if not isinstance(number, int):
        number = 0

    return Alert(
        created_at=parse_date(raw.get("createdAt")),
        number=number,
        update_error_body=_str(update_error.get("body")),
        update_error_title=_str(update_error.get("title")),
        update_error_type=_str(update_error.get("errorType")),
        title=_str(advisory.get("summary")),
        advisory_link=_str(advisory.get("permalink")),
        description=_str(advisory.get("description")),
        package=_str(package.get("name")),
        ecosystem=_str(package.get("ecosystem")),
        affected_versions=_str(vulnerability.get("vulnerableVersionRange")),
        alert_link=alert_link(repository_url, number),
    )
