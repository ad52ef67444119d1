"""Command-line entry point for the scenario duplicate detector.

Loads environment variables, applies command-line overrides, validates the
configuration and runs one operation, printing its result as JSON.
"""
from dotenv import load_dotenv
import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

from apocaliptyx.config import reload_config
from apocaliptyx.dedup.service import DuplicateDetectionService
from apocaliptyx.repository import RepositoryError
from apocaliptyx.utils.logger import configure_logging, log_error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Detect duplicate Apocaliptyx scenarios.")
    parser.add_argument('--backend', choices=['supabase', 'memory'], help='Scenario repository backend.')
    parser.add_argument('--fixtures', type=str, help='JSON file seeding the memory backend (implies --backend memory).')
    parser.add_argument('--log-level', type=str, help='Logging level override.')

    sub = parser.add_subparsers(dest='command', required=True)

    check = sub.add_parser('check', help='Check a candidate scenario for duplicates.')
    check.add_argument('title', type=str)
    check.add_argument('--description', type=str, default='')
    check.add_argument('--exclude-id', type=str, help='Id of the scenario being edited.')

    suggest = sub.add_parser('suggest', help='Suggest similar scenarios for a partial title.')
    suggest.add_argument('partial_title', type=str)

    hash_cmd = sub.add_parser('hash', help='Print the content hash of a title/description.')
    hash_cmd.add_argument('title', type=str)
    hash_cmd.add_argument('--description', type=str, default='')

    sub.add_parser('backfill', help='Compute content hashes for scenarios lacking one.')

    mark = sub.add_parser('mark-duplicate', help='Cancel a scenario as a duplicate of another.')
    mark.add_argument('scenario_id', type=str)
    mark.add_argument('original_id', type=str)

    return parser


def _apply_overrides(args: argparse.Namespace) -> None:
    if args.fixtures is not None:
        os.environ['SCENARIO_FIXTURE_FILE'] = args.fixtures
        os.environ['SCENARIO_BACKEND'] = 'memory'
    if args.backend is not None:
        os.environ['SCENARIO_BACKEND'] = args.backend
    if args.log_level is not None:
        os.environ['LOG_LEVEL'] = args.log_level


async def _run(service: DuplicateDetectionService, args: argparse.Namespace):
    if args.command == 'check':
        result = await service.check_for_duplicates(args.title, args.description, args.exclude_id)
        return result.to_dict()
    if args.command == 'suggest':
        return [s.to_dict() for s in await service.get_suggestions(args.partial_title)]
    if args.command == 'backfill':
        return {"updated": await service.update_all_hashes()}
    if args.command == 'mark-duplicate':
        return {"success": await service.mark_as_duplicate(args.scenario_id, args.original_id)}
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    if args.command == 'hash':
        print(json.dumps({"contentHash": DuplicateDetectionService.generate_content_hash(args.title, args.description)}))
        return 0

    _apply_overrides(args)
    config = reload_config()
    configure_logging(config.log_level, config.log_format)
    config.log_configuration()

    issues = config.validate_configuration()
    if issues:
        log_error("Configuration validation failed", issues=issues)
        print("❌ Configuration issues found:", file=sys.stderr)
        for issue in issues:
            print(f"  - {issue}", file=sys.stderr)
        return 1

    try:
        service = DuplicateDetectionService(config=config)
    except RepositoryError as e:
        log_error("Could not create scenario repository", error=e.message)
        print(f"❌ {e.message}", file=sys.stderr)
        return 1

    output = asyncio.run(_run(service, args))
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
