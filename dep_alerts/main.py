#!/usr/bin/env python3
"""Main entry point for the Dependabot failure report."""

import argparse
import copy
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

from .fetchers.github import GITHUB_GRAPHQL_URL, GitHubGraphQL, fetch_mapped_alerts
from .preview import write_preview
from .report import build_report, join_report

DEFAULT_CONFIG = {
    "app": {
        "output": "preview.html",
    },
    "github": {
        "owner": "cumet04",
        "repo": "dependabot-issues",
        "count": 10,
        "api_url": GITHUB_GRAPHQL_URL,
        "token_env": "GITHUB_TOKEN",
    },
}


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def load_config(config_path: Optional[str] = None) -> dict:
    """Load configuration from YAML file, falling back to the defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return config

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, "r") as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    for section, values in loaded.items():
        if not isinstance(config.get(section), dict):
            config[section] = values
            continue
        # A section with every key commented out loads as None
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ValueError(f"Config section '{section}' must be a mapping")
        config[section].update(values)

    return config


def make_client(github_config: dict) -> GitHubGraphQL:
    """Build the GraphQL client with the token from the configured env var."""
    token_env = github_config.get("token_env", "GITHUB_TOKEN")
    token = os.environ.get(token_env, "")
    return GitHubGraphQL(token, api_url=github_config.get("api_url", GITHUB_GRAPHQL_URL))


def run_once(
    config: dict,
    client: Optional[GitHubGraphQL] = None,
    to_stdout: bool = False,
) -> str:
    """Fetch alerts, format the failed updates, and emit the report."""
    logger = logging.getLogger(__name__)
    start_time = datetime.now()

    github_config = config.get("github", {})
    owner = github_config["owner"]
    repo = github_config["repo"]
    count = github_config.get("count", 10)

    logger.info(f"Collecting Dependabot update failures for {owner}/{repo}")

    if client is None:
        client = make_client(github_config)

    alerts = fetch_mapped_alerts(client, owner, repo, count)
    drafts = build_report(alerts)
    content = join_report(drafts)

    logger.info(f"Alerts with failed updates: {len(drafts)} of {len(alerts)}")

    if to_stdout:
        sys.stdout.write(content)
    else:
        output = config.get("app", {}).get("output", "preview.html")
        write_preview(output, content)

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(f"Done in {duration:.2f}s")
    return content


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Preview failed Dependabot security updates as an HTML report"
    )
    parser.add_argument(
        "--config",
        help="Path to config YAML file (default: built-in settings)",
    )
    parser.add_argument(
        "--output",
        help="Override the preview file path from config",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the markdown report instead of writing the HTML preview",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file",
    )

    args = parser.parse_args()

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = load_config(args.config)
        if args.output:
            config["app"]["output"] = args.output
    except FileNotFoundError as e:
        logging.error(f"Configuration error: {e}")
        sys.exit(1)
    except Exception as e:
        logging.error(f"Error loading config: {e}")
        sys.exit(1)

    try:
        run_once(config, to_stdout=args.stdout)
    except KeyboardInterrupt:
        logging.error("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logging.exception(f"Error during execution: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
