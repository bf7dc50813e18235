"""Data models for Dependabot alerts."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Alert:
    """An open Dependabot vulnerability alert for a single repository."""

    number: int
    created_at: Optional[datetime] = None
    update_error_body: str = ""
    update_error_title: str = ""
    update_error_type: str = ""
    title: str = ""
    advisory_link: str = ""
    description: str = ""
    package: str = ""
    ecosystem: str = ""  # NPM, RUBYGEMS, PIP, ... (SecurityAdvisoryEcosystem enum)
    affected_versions: str = ""
    alert_link: str = ""


@dataclass
class Draft:
    """Rendered title and body for one alert."""

    alert: Alert
    title: str
    body: str


@dataclass
class AlertPage:
    """One page of raw vulnerabilityAlerts nodes."""

    repository_url: str
    nodes: List[Dict[str, Any]] = field(default_factory=list)
    has_next_page: bool = False
    end_cursor: Optional[str] = None
