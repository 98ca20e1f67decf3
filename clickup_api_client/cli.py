"""CLI commands for the ClickUp API client."""

import argparse
import asyncio
import json
import logging
import sys

from .errors import ClickUpApiError


def _json_arg(value):
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"not valid JSON: {exc}") from exc


def _parse_params(pairs):
    params = {}
    for p in pairs:
        k, _, v = p.partition("=")
        params[k] = v
    return params


async def _run_api(args):
    from .connection import get_connection

    async with get_connection() as conn:
        response = await conn.request(
            args.method,
            args.endpoint,
            params=_parse_params(args.param) or None,
            json=args.data,
        )
        return response.json() if response.content.strip() else None


async def _run_tasks(args):
    from .connection import get_connection
    from .tasks import TasksService

    async with get_connection() as conn:
        tasks = TasksService(conn)
        if args.all:
            return [t.model_dump(mode="json") async for t in tasks.iter_tasks(args.list_id, start_page=args.page)]
        page = await tasks.get_tasks(args.list_id, page=args.page)
        return {
            "page": page.page,
            "has_next_page": page.has_next_page,
            "tasks": [t.model_dump(mode="json") for t in page.items],
        }


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Call the ClickUp REST API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log requests, retries and circuit breaker changes",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # api subcommand
    api_parser = subparsers.add_parser(
        "api",
        help="Make a raw ClickUp API call",
    )
    api_parser.add_argument(
        "endpoint",
        help="API endpoint path relative to the base URL (e.g., team, task/abc123)",
    )
    api_parser.add_argument(
        "--method",
        default="GET",
        help="HTTP method (default: GET)",
    )
    api_parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter (repeatable, e.g., --param archived=false)",
    )
    api_parser.add_argument(
        "--data",
        type=_json_arg,
        default=None,
        help="JSON request body",
    )

    # tasks subcommand
    tasks_parser = subparsers.add_parser(
        "tasks",
        help="List tasks in a list",
    )
    tasks_parser.add_argument(
        "list_id",
        help="ClickUp list ID",
    )
    tasks_parser.add_argument(
        "--page",
        type=int,
        default=0,
        help="Zero-based page to fetch (default: 0)",
    )
    tasks_parser.add_argument(
        "--all",
        action="store_true",
        help="Fetch every page starting at --page",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "api":
        runner = _run_api
    elif args.command == "tasks":
        runner = _run_tasks
    else:
        parser.print_help()
        return 0

    try:
        result = asyncio.run(runner(args))
    except ClickUpApiError as err:
        sys.stderr.write(f"error [{err.kind.value}]: {err.message}\n")
        return 1

    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
