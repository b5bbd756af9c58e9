"""
Entry point for running photoport as a module.

Usage:
    python -m photoport import --resource albums.json --access-token TOKEN
    python -m photoport import -c config.yaml -r albums.yaml --job-id 1234
    python -m photoport oauth-config instagram
"""

import argparse
import json
import logging
import os
import sqlite3
import sys
import uuid
from pathlib import Path

import requests
from pydantic import ValidationError

from photoport.auth import get_oauth_config
from photoport.config import Settings
from photoport.daybook import DaybookPhotosImporter
from photoport.executor import IdempotentImportExecutor, get_result_store
from photoport.models import TokensAndUrlAuthData, load_photos_container


def run_import(args: argparse.Namespace) -> int:
    """Import a photos bundle into Daybook."""
    try:
        settings = Settings.from_yaml(args.config) if args.config else Settings()
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger(__name__)

    access_token = args.access_token or os.environ.get("PHOTOPORT_ACCESS_TOKEN")
    if not access_token:
        print("Error: --access-token or PHOTOPORT_ACCESS_TOKEN is required", file=sys.stderr)
        return 1

    try:
        resource = load_photos_container(args.resource)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValidationError, ValueError) as e:
        print(f"Error: Invalid resource bundle: {e}", file=sys.stderr)
        return 1

    if settings.state.backend == "sqlite":
        try:
            store = get_result_store("sqlite", db_path=str(settings.state.db_path))
        except sqlite3.Error as e:
            print(
                f"Error: Cannot open import state {settings.state.db_path}: {e}", file=sys.stderr
            )
            return 1
        logger.info(f"Using SQLite import state: {settings.state.db_path}")
    else:
        store = get_result_store("memory")
        logger.warning("Using in-memory import state; a rerun will re-create albums")

    job_id = args.job_id or str(uuid.uuid4())
    executor = IdempotentImportExecutor(store, job_id)
    auth_data = TokensAndUrlAuthData(access_token=access_token)

    try:
        with requests.Session() as session:
            importer = DaybookPhotosImporter(
                session,
                job_store=None,
                base_url=settings.daybook.base_url,
                timeout=settings.daybook.timeout_seconds,
            )
            importer.import_item(job_id, executor, auth_data, resource)

        errors = executor.errors()
    finally:
        store.close()

    logger.info(
        f"Job {job_id}: {len(resource.albums)} album(s), {len(errors)} failed"
    )
    for err in errors:
        logger.warning(f"Album {err.label!r} ({err.key}) not imported: {err.message}")

    # The importer reports OK even with failed albums; surface them here
    return 2 if errors else 0


def run_oauth_config(args: argparse.Namespace) -> int:
    """Print a provider's OAuth2 descriptor as JSON."""
    try:
        config = get_oauth_config(args.service)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1

    print(
        json.dumps(
            {
                "service_name": config.service_name,
                "authorization_url": config.authorization_url,
                "token_url": config.token_url,
                "export_scopes": {k: list(v) for k, v in config.export_scopes.items()},
                "import_scopes": {k: list(v) for k, v in config.import_scopes.items()},
            },
            indent=2,
        )
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Replay exported photo albums into a destination service"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import albums into Daybook")
    import_parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: settings from environment)",
    )
    import_parser.add_argument(
        "--resource",
        "-r",
        type=Path,
        required=True,
        help="Exported photos bundle (JSON or YAML)",
    )
    import_parser.add_argument(
        "--access-token",
        default=None,
        help="Bearer token for the destination (default: $PHOTOPORT_ACCESS_TOKEN)",
    )
    import_parser.add_argument(
        "--job-id",
        default=None,
        help="Job id; reuse it to resume a failed import (default: new UUID)",
    )
    import_parser.set_defaults(func=run_import)

    oauth_parser = subparsers.add_parser("oauth-config", help="Show a provider's OAuth2 settings")
    oauth_parser.add_argument("service", help="Provider name, e.g. instagram")
    oauth_parser.set_defaults(func=run_oauth_config)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
