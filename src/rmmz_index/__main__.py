"""
Main entry point for rmmz-index.
Usage: python -m rmmz_index --project PATH <command> [options]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import orjson

from . import __version__
from .assets import AssetService, format_bytes
from .errors import ProjectValidationError, RmmzIndexError, SourceNotFoundError
from .game_data import COLLECTION_TYPES, GameDataService, SearchOptions, SearchResult
from .settings import AppSettings
from .utils.logging_config import setup_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_PROJECT = 2


def emit_json(data: Any) -> None:
    """Write data to stdout as indented JSON."""
    sys.stdout.write(orjson.dumps(data, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS).decode())
    sys.stdout.write("\n")


def result_to_dict(result: SearchResult) -> Dict[str, Any]:
    return {"type": result.type, "id": result.id, "name": result.name, "data": result.data}


def parse_where(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """Parse ``key=value`` pairs; values are read as JSON when possible."""
    where: Dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid --where expression (expected key=value): {pair}")
        try:
            where[key] = orjson.loads(raw)
        except orjson.JSONDecodeError:
            where[key] = raw
    return where


def options_from_json(text: str) -> SearchOptions:
    """Build SearchOptions from a JSON predicate object.

    Accepted keys: types, idRange {min, max}, nameContains, hasProperty,
    where, orderBy, limit.
    """
    try:
        payload = orjson.loads(text)
    except orjson.JSONDecodeError as e:
        raise ValueError(f"Query is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ValueError("Query must be a JSON object")

    types = payload.get("types")
    if types is not None and (
        not isinstance(types, list) or not all(isinstance(t, str) for t in types)
    ):
        raise ValueError("Query 'types' must be a list of type names")

    id_range = payload.get("idRange") or {}
    if not isinstance(id_range, dict):
        raise ValueError("Query 'idRange' must be an object with 'min' and/or 'max'")
    where = payload.get("where") or {}
    if not isinstance(where, dict):
        raise ValueError("Query 'where' must be an object")

    id_min, id_max, limit = id_range.get("min"), id_range.get("max"), payload.get("limit")
    for label, value in (("idRange.min", id_min), ("idRange.max", id_max), ("limit", limit)):
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ValueError(f"Query '{label}' must be an integer")

    return SearchOptions(
        types=types,
        id_min=id_min,
        id_max=id_max,
        name_contains=payload.get("nameContains"),
        has_property=payload.get("hasProperty"),
        where=where,
        order_by=payload.get("orderBy"),
        limit=limit,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rmmz-index",
        description="Index the database and audit the assets of an RPG Maker MZ project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Record counts per collection
  rmmz-index --project ~/Games/MyGame stats

  # Enemies with ids 5..10 sorted by name
  rmmz-index --project ~/Games/MyGame search --types enemy --id-min 5 --id-max 10 --order-by name

  # Same query as a JSON predicate
  rmmz-index --project ~/Games/MyGame query '{"types": ["enemy"], "idRange": {"min": 5, "max": 10}}'

  # Show which files would be removed
  rmmz-index --project ~/Games/MyGame remove-unused
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--project",
        help="Project root containing Game.rpgproject (default: last used project)",
    )
    parser.add_argument("--settings", help="Settings INI file (default: per-user config)")
    parser.add_argument("--profile", default="default", help="Settings profile name")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("stats", help="Record counts per collection")

    search = commands.add_parser("search", help="Filter database records")
    search.add_argument("--types", nargs="+", choices=COLLECTION_TYPES, help="Collection types")
    search.add_argument("--id-min", type=int, help="Lowest id (inclusive)")
    search.add_argument("--id-max", type=int, help="Highest id (inclusive)")
    search.add_argument("--name", help="Case-insensitive name substring")
    search.add_argument("--has-property", help="Only records carrying this field")
    search.add_argument("--where", nargs="+", metavar="KEY=VALUE", help="Field equality filters")
    search.add_argument("--order-by", help="Sort by this field")
    search.add_argument("--limit", type=int, help="Maximum number of results")

    query = commands.add_parser("query", help="Filter database records with a JSON predicate")
    query.add_argument("predicate", help="JSON object with the query options")

    get = commands.add_parser("get", help="Show one record")
    get.add_argument("type", help="Collection type (actor, enemy, ...)")
    get.add_argument("id", type=int, help="Record id")

    find = commands.add_parser("find", help="Find records by name")
    find.add_argument("name", help="Case-insensitive name substring")

    commands.add_parser("db-context", help="Markdown overview of the database")

    assets = commands.add_parser("assets", help="Asset usage report")
    assets.add_argument("--summary", action="store_true", help="Omit the per-file list")

    commands.add_parser("asset-context", help="Markdown asset report")
    commands.add_parser("asset-mapping", help="Map each asset to the records that use it")

    remove = commands.add_parser("remove-unused", help="Delete assets nothing references")
    remove.add_argument(
        "--apply", action="store_true", help="Actually delete files (default is a dry run)"
    )

    commands.add_parser("project-size", help="Disk usage of the main project directories")

    return parser


def run_command(args: argparse.Namespace, project_path: Path, settings: AppSettings) -> int:
    """Dispatch one parsed command against a project."""
    if args.command in ("stats", "search", "query", "get", "find", "db-context"):
        data_service = GameDataService(project_path, settings=settings)

        if args.command == "stats":
            emit_json(data_service.get_statistics())
        elif args.command == "search":
            options = SearchOptions(
                types=args.types,
                id_min=args.id_min,
                id_max=args.id_max,
                name_contains=args.name,
                has_property=args.has_property,
                where=parse_where(args.where),
                order_by=args.order_by,
                limit=args.limit,
            )
            emit_json([result_to_dict(r) for r in data_service.search(options)])
        elif args.command == "query":
            results = data_service.search(options_from_json(args.predicate))
            emit_json([result_to_dict(r) for r in results])
        elif args.command == "get":
            record = data_service.get_entry(args.type, args.id)
            if record is None:
                raise SourceNotFoundError(f"No {args.type} with id {args.id}")
            emit_json(record)
        elif args.command == "find":
            emit_json([result_to_dict(r) for r in data_service.find_by_name(args.name)])
        else:
            sys.stdout.write(data_service.generate_context())
        return EXIT_OK

    asset_service = AssetService(project_path, settings=settings)

    if args.command == "assets":
        emit_json(asset_service.analyze().to_dict(include_assets=not args.summary))
    elif args.command == "asset-context":
        sys.stdout.write(asset_service.generate_context())
    elif args.command == "asset-mapping":
        emit_json(asset_service.generate_mapping())
    elif args.command == "remove-unused":
        result = asset_service.remove_unused(dry_run=not args.apply)
        emit_json(
            {
                "dryRun": result.dry_run,
                "removed": result.removed,
                "failed": result.failed,
                "savedSpace": result.saved_space,
                "savedSpaceFormatted": format_bytes(result.saved_space),
            }
        )
        if result.failed:
            return EXIT_ERROR
    elif args.command == "project-size":
        sizes = asset_service.project_size()
        emit_json(
            {
                "bytes": sizes,
                "formatted": {name: format_bytes(size) for name, size in sizes.items()},
            }
        )
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")

    try:
        settings = AppSettings(profile=args.profile, settings_file=args.settings)
        setup_logging(settings, console_level="INFO" if args.verbose else None)
        logger.debug(f"Configuration loaded from {settings.get_settings_file_path()}")

        for message in settings.validate().messages:
            logger.debug(f"Configuration: {message}")

        project = args.project or (str(settings.project_path) if settings.project_path else "")
        if not project:
            raise ProjectValidationError("No project path given and no previous project stored")
        project_path = Path(project).expanduser()

        status = run_command(args, project_path, settings)
        settings.project_path = project_path
        settings.add_recent_project(project_path)
        return status

    except ProjectValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_PROJECT
    except (RmmzIndexError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:
        logger.exception("Unhandled exception in main")
        print(f"Error: An unexpected error occurred: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
