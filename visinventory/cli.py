"""CLI entrypoints for visinventory commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import load_config
from .errors import ConfigError
from .logging import configure_logging, get_logger
from .report import diff_counts, legacy_counts_by_app, legacy_total
from .sinks import read_json, write_bulk, write_json
from .walker import CorpusWalker, WalkContext


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_root_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Path to the integrations checkout (defaults to current directory).",
    )
    parser.add_argument(
        "--beats",
        default=None,
        help="Also collect Kibana 7 content from a beats checkout.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .visinventory.yml (defaults to the integrations root).",
    )
    parser.add_argument(
        "--no-provenance",
        action="store_true",
        help="Skip git commit lookups for faster runs.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write a DEBUG-level run log to this path.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="visinventory",
        description="Inventory Kibana visualizations shipped in integration packages.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    collect_parser = subparsers.add_parser(
        "collect",
        help="Collect visualization records and write them to a result file.",
    )
    _add_verbose_option(collect_parser, suppress_default=True)
    _add_root_options(collect_parser)
    collect_parser.add_argument(
        "--output",
        default=None,
        help="Result JSON path (defaults to output.path from the config).",
    )
    collect_parser.add_argument(
        "--bulk",
        default=None,
        help="Also write an NDJSON _bulk payload to this path.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Fail when the number of legacy visualizations exceeds a limit.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_root_options(check_parser)
    check_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum allowed legacy visualizations (defaults to legacy.limit).",
    )

    diff_parser = subparsers.add_parser(
        "diff",
        help="Compare legacy visualization counts per app between two result files.",
    )
    _add_verbose_option(diff_parser, suppress_default=True)
    diff_parser.add_argument("before", help="Result JSON from the earlier revision.")
    diff_parser.add_argument("after", help="Result JSON from the later revision.")

    return parser


def _walker_for(args: argparse.Namespace) -> CorpusWalker:
    config_path = Path(args.config) if args.config else Path(args.root)
    config = load_config(config_path)
    if args.no_provenance:
        config.provenance = False
    return CorpusWalker(WalkContext.from_config(config))


def _collect(walker: CorpusWalker, args: argparse.Namespace) -> list:
    records = walker.collect_integrations(args.root)
    if args.beats:
        records.extend(walker.collect_beats(args.beats))
    return records


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for visinventory commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = getattr(args, "log_file", None)
    configure_logging(
        verbose=bool(args.verbose), log_file=Path(log_file) if log_file else None
    )
    logger = get_logger("cli")

    if args.command == "diff":
        try:
            before = legacy_counts_by_app(read_json(Path(args.before)))
            after = legacy_counts_by_app(read_json(Path(args.after)))
        except (OSError, ValueError) as exc:
            parser.exit(1, f"visinventory diff failed: {exc}\n")
        print(json.dumps(diff_counts(before, after), indent=2))
        return

    try:
        walker = _walker_for(args)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "collect":
        records = _collect(walker, args)
        output = Path(args.output or walker.config.output.path)
        count = write_json(records, output)
        logger.info("Wrote %d visualizations to %s", count, output)
        if args.bulk:
            chunks = write_bulk(
                records,
                Path(args.bulk),
                index=walker.config.output.index,
                chunk_size=walker.config.output.chunk_size,
            )
            logger.info("Wrote %d bulk chunks to %s", chunks, args.bulk)
        print(f"Collected {count} visualizations ({legacy_total(records)} legacy)")
    elif args.command == "check":
        limit = args.limit if args.limit is not None else walker.config.legacy.limit
        if limit is None:
            parser.exit(1, "No legacy limit configured; pass --limit or set legacy.limit.\n")
        total = legacy_total(_collect(walker, args))
        if total > limit:
            parser.exit(1, f"{total} legacy visualizations exceed the limit of {limit}\n")
        print(f"{total} legacy visualizations (limit {limit})")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
