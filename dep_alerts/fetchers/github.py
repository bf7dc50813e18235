"""GitHub GraphQL fetcher for Dependabot alerts."""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..mapping import map_alert
from ..models import Alert, AlertPage

logger = logging.getLogger(__name__)

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"

ALERTS_QUERY = """
query ($owner: String!, $name: String!, $count: Int!, $cursor: String) {
  repository(owner: $owner, name: $name) {
    url
    vulnerabilityAlerts(first: $count, after: $cursor, states: OPEN) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        createdAt
        number
        dependabotUpdate {
          error {
            body
            errorType
            title
          }
        }
        securityAdvisory {
          summary
          permalink
          description
        }
        securityVulnerability {
          vulnerableVersionRange
          package {
            name
            ecosystem
          }
        }
      }
    }
  }
}
"""


class GraphQLError(RuntimeError):
    """Raised when a GraphQL response carries errors or no data."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class GitHubGraphQL:
    """Authenticated client for the GitHub GraphQL endpoint."""

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_GRAPHQL_URL,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Content-Type": "application/json",
            "User-Agent": "dependabot-issues",
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        else:
            logger.warning("No GitHub token configured, sending unauthenticated request")

    def query(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run a GraphQL query and return its ``data`` object.

        Raises:
            requests.exceptions.RequestException: On transport or HTTP errors
            GraphQLError: If the response reports errors or has no data
        """
        response = self.session.post(
            self.api_url,
            headers=self.headers,
            json={"query": query, "variables": variables},
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise GraphQLError(f"Unexpected GraphQL response: {type(payload).__name__}")

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(e.get("message", str(e)) for e in errors)
            raise GraphQLError(f"GraphQL errors: {messages}", errors)
        if payload.get("data") is None:
            raise GraphQLError("GraphQL response has no data")
        return payload["data"]


def fetch_alerts(
    client: GitHubGraphQL,
    owner: str,
    repo: str,
    count: int,
    cursor: Optional[str] = None,
) -> AlertPage:
    """
    Fetch one page of open Dependabot alerts.

    Args:
        client: GraphQL client
        owner: Repository owner
        repo: Repository name
        count: Page size (first N alerts)
        cursor: Optional endCursor of a previous page

    Returns:
        AlertPage with raw nodes in the order returned by GitHub
    """
    if not isinstance(count, int) or count <= 0:
        raise ValueError(f"count must be a positive integer, got {count!r}")

    logger.debug(f"Fetching up to {count} open alerts for {owner}/{repo}")
    data = client.query(
        ALERTS_QUERY,
        {"owner": owner, "name": repo, "count": count, "cursor": cursor},
    )

    repository = data.get("repository")
    if repository is None:
        raise GraphQLError(f"Repository {owner}/{repo} not found")

    alerts = repository.get("vulnerabilityAlerts") or {}
    page_info = alerts.get("pageInfo") or {}
    page = AlertPage(
        repository_url=repository.get("url") or "",
        nodes=list(alerts.get("nodes") or []),
        has_next_page=bool(page_info.get("hasNextPage")),
        end_cursor=page_info.get("endCursor"),
    )

    logger.info(f"Fetched {len(page.nodes)} open alerts from {owner}/{repo}")
    if page.has_next_page:
        # Only one page is requested per run
        logger.warning(
            f"More than {count} open alerts exist for {owner}/{repo}; "
            f"remaining alerts start after cursor {page.end_cursor}"
        )
    return page


def fetch_mapped_alerts(
    client: GitHubGraphQL, owner: str, repo: str, count: int
) -> List[Alert]:
    """Fetch one page and map every node onto an Alert."""
    page = fetch_alerts(client, owner, repo, count)
    return [map_alert(node, page.repository_url) for node in page.nodes]
