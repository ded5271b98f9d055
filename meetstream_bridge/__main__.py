"""Command-line interface for the MeetStream bridge.

Examples:
    export MEETSTREAM_API_KEY=ms_...
    python -m meetstream_bridge discover
    python -m meetstream_bridge sessions --live
    python -m meetstream_bridge sessions --limit 5 --json
    python -m meetstream_bridge transcript bot_abc123
    python -m meetstream_bridge search standup
    python -m meetstream_bridge diagnostics
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import ClientConfig
from .core.log_buffer import PACKAGE_LOGGER, setup_log_buffer
from .diagnostics import build_diagnostics
from .exceptions import CatalogError, ConfigError
from .models import Session, SessionKind
from .orchestrator import Orchestrator

_LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="meetstream-bridge",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--api-key", help="API key (default: $MEETSTREAM_API_KEY)")
    parser.add_argument("--base-url", help="API base URL (default: $MEETSTREAM_BASE_URL or the public API)")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds (5-10)")
    parser.add_argument("--concurrency", type=int, help="Parallel requests during discovery")
    parser.add_argument("--catalog", type=Path, help="Probe catalog YAML overriding the bundled one")
    parser.add_argument(
        "--no-enrich",
        action="store_true",
        help="Skip fetching per-session detail after discovery",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("discover", help="Run one discovery cycle and print the report")

    sessions = sub.add_parser("sessions", help="List recent (or live) sessions")
    sessions.add_argument("--live", action="store_true", help="List live sessions instead of recent ones")
    sessions.add_argument("--limit", type=int, help="Maximum sessions to list")

    transcript = sub.add_parser("transcript", help="Print a session transcript")
    transcript.add_argument("session_id", metavar="ID")

    search = sub.add_parser("search", help="Search sessions by title or participant")
    search.add_argument("query", metavar="QUERY")

    sub.add_parser("diagnostics", help="Run discovery and print a diagnostics snapshot")
    return parser


def _format_session(session: Session) -> str:
    marker = " [synthetic]" if session.is_synthetic else ""
    created = session.created_at.strftime("%Y-%m-%d %H:%M")
    return f"{session.id}\t{session.status.value}\t{created}\t{session.display_name}{marker}"


def _print_sessions(sessions: list[Session], as_json: bool) -> None:
    if as_json:
        print(json.dumps([session.to_dict() for session in sessions], indent=2))
        return
    if not sessions:
        print("No sessions.")
    for session in sessions:
        print(_format_session(session))


async def _run(args: argparse.Namespace, config: ClientConfig) -> int:
    async with Orchestrator(config) as orchestrator:
        if args.command == "discover":
            report = await orchestrator.refresh()
            if args.json:
                print(json.dumps(report.to_dict(), indent=2))
            else:
                print(f"status: {orchestrator.get_connection_status().value}")
                print(f"auth scheme: {report.auth_scheme.value if report.auth_scheme else '-'}")
                print(f"sessions: {report.session_count} ({report.enriched_count} enriched)")
                for path, info in report.endpoints.items():
                    detail = info.get("error") or info.get("shape")
                    print(f"  {info['status']:<7} {path}  {detail}")
        elif args.command == "sessions":
            kind = SessionKind.LIVE if args.live else SessionKind.RECENT
            _print_sessions(await orchestrator.list_sessions(kind, limit=args.limit), args.json)
        elif args.command == "transcript":
            text = await orchestrator.load_transcript(args.session_id)
            if args.json:
                print(json.dumps({"session_id": args.session_id, "transcript": text}, indent=2))
            else:
                print(text)
        elif args.command == "search":
            _print_sessions(await orchestrator.search_sessions(args.query), args.json)
        elif args.command == "diagnostics":
            await orchestrator.refresh()
            print(json.dumps(build_diagnostics(orchestrator), indent=2, default=str))
    return 0


def _config_from_args(args: argparse.Namespace) -> ClientConfig:
    overrides: dict[str, Any] = {
        "api_key": args.api_key,
        "base_url": args.base_url,
        "request_timeout": args.timeout,
        "max_concurrency": args.concurrency,
        "catalog_path": args.catalog,
        "enrich_sessions": False if args.no_enrich else None,
    }
    return ClientConfig.from_env(**overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING
    # The log buffer lowers the package logger to INFO; stderr keeps its own level
    console = logging.StreamHandler()
    console.setLevel(level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[console],
    )
    setup_log_buffer()
    if args.verbose:
        logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)

    try:
        config = _config_from_args(args)
        return asyncio.run(_run(args, config))
    except (ConfigError, CatalogError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
