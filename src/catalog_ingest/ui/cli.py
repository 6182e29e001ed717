from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from catalog_ingest.app import ingest_catalog
from catalog_ingest.config import IngestionConfig, configure_logging, get_storage_config
from catalog_ingest.config.ingestion import MAX_PAGE_SIZE
from catalog_ingest.domain.model import EntryKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest open-source projects into the catalog")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Discover, enrich and store new catalog entries")
    ingest.add_argument(
        "--kind",
        choices=[kind.value for kind in EntryKind],
        default=EntryKind.MCP_SERVER.value,
        help="Entry kind to ingest; selects queries and keyword tables (default: %(default)s)",
    )
    ingest.add_argument(
        "--query",
        dest="queries",
        action="append",
        help="Search query to run; repeat for several (defaults to the kind's query set)",
    )
    ingest.add_argument(
        "--min-popularity",
        type=int,
        help="Minimum popularity (stars) a candidate needs",
    )
    ingest.add_argument(
        "--max-candidates",
        type=int,
        help="Maximum number of ranked candidates to enrich",
    )
    ingest.add_argument(
        "--min-interval-ms",
        type=int,
        help="Minimum spacing between index calls in milliseconds",
    )
    ingest.add_argument(
        "--page-size",
        type=int,
        help=f"Search results requested per query (1-{MAX_PAGE_SIZE})",
    )
    ingest.add_argument(
        "--no-localization",
        action="store_true",
        help="Copy primary fields verbatim instead of producing localized copies",
    )
    ingest.add_argument(
        "--fallback-image-url",
        type=str,
        help="Image URL used when no repository image can be verified",
    )
    ingest.add_argument(
        "--dry-run",
        action="store_true",
        help="Run every phase but do not write to the catalog",
    )
    ingest.add_argument(
        "--export",
        type=Path,
        nargs="?",
        const=True,
        metavar="PATH",
        help="Write accepted entries as JSON to PATH (without PATH: into the data directory)",
    )
    ingest.add_argument(
        "--catalog",
        choices=["api", "sqlite"],
        default="api",
        help="Catalog backend: the REST API or the local SQLite store (default: %(default)s)",
    )
    return parser.parse_args(list(argv))


def _build_config(args: argparse.Namespace) -> IngestionConfig:
    overrides: dict[str, object] = {}
    if args.queries:
        queries = tuple(query.strip() for query in args.queries if query.strip())
        if not queries:
            raise ValueError("--query must not be blank")
        overrides["queries"] = queries
    if args.min_popularity is not None:
        if args.min_popularity < 0:
            raise ValueError("--min-popularity must be non-negative")
        overrides["min_popularity"] = args.min_popularity
    if args.max_candidates is not None:
        overrides["max_candidates"] = args.max_candidates
    if args.min_interval_ms is not None:
        overrides["min_interval_seconds"] = args.min_interval_ms / 1000
    if args.page_size is not None:
        overrides["page_size"] = args.page_size
    if args.fallback_image_url:
        overrides["fallback_image_url"] = args.fallback_image_url
    overrides["localization_enabled"] = not args.no_localization
    overrides["persist_enabled"] = not args.dry_run
    return IngestionConfig.for_kind(EntryKind(args.kind), **overrides)


def _export_path(args: argparse.Namespace) -> Path | None:
    if args.export is True:
        return get_storage_config().export_path()
    return args.export


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(verbose=parsed_args.verbose)
        config = _build_config(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)

    try:
        result = ingest_catalog(
            config,
            backend=parsed_args.catalog,
            export_path=_export_path(parsed_args),
        )
    except Exception:
        log.exception("Fatal error during ingestion")
        sys.exit(EXIT_FAILED)

    for key, value in result.summary().items():
        log.info("  %s: %s", key, value)
    sys.exit(EXIT_OK if result.succeeded else EXIT_FAILED)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
