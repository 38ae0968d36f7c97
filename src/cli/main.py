"""catalyst-sb CLI entry points.
This module exposes push, ping, and run-spec commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from typing import Any, Sequence

from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.config import CatalystConfig
from core.constants import SUPPORTED_TABLES
from core.errors import CatalystError
from core.run_spec_execution import render_push_summary
from core.types import PushOptions
from store.catalyst_sdk import CatalystClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="catalyst-sb",
        description="Catalyst Supabase manager",
    )
    parser.add_argument("--options-file", help="JSON options file with Supabase settings")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_push_command(subparsers)
    _add_ping_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the catalyst-sb CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        with _build_client(args.options_file) as client:
            return _dispatch(parser, client, args)
    except CatalystError as error:
        print(f"{args.command.replace('-', '_')}_error={error}")
        return 1


def _dispatch(
    parser: argparse.ArgumentParser,
    client: CatalystClient,
    args: argparse.Namespace,
) -> int:
    if args.command == "push":
        return _run_push_command(client, args)
    if args.command == "ping":
        return _run_ping_command(client, args)
    if args.command == "run-spec":
        return run_run_spec_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(options_file: str | None) -> CatalystClient:
    """Build SDK client from environment and optional options file."""
    return CatalystClient(CatalystConfig.from_env(options_file))


def _run_push_command(client: CatalystClient, args: argparse.Namespace) -> int:
    """Handle push command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = PushOptions(
        fund_number=args.fund,
        skip_existing=not args.force_insert,
        include_derived_fields=args.derived_fields,
    )
    summary = client.push(options)
    for line in render_push_summary(summary):
        print(line)
    return 0


def _run_ping_command(client: CatalystClient, args: argparse.Namespace) -> int:
    """Handle ping command."""
    print(f"{args.table}\t{client.ping(args.table)}")
    return 0


def _add_push_command(subparsers: Any) -> None:
    """Register push subcommand."""
    parser = subparsers.add_parser(
        "push",
        help="Push data from Catalyst repositories to the Catalyst Supabase database",
    )
    parser.add_argument(
        "-f",
        "--fund",
        type=int,
        required=True,
        help="Catalyst fund number to push",
    )
    parser.add_argument(
        "--force-insert",
        action="store_true",
        help="Insert challenges, proposals, and assessments even if the fund already has them",
    )
    parser.add_argument(
        "--derived-fields",
        action="store_true",
        help="Add rating_avg and notes_len columns to assessment rows",
    )


def _add_ping_command(subparsers: Any) -> None:
    """Register ping subcommand."""
    parser = subparsers.add_parser("ping", help="Check connection with a Catalyst Supabase table")
    parser.add_argument(
        "-t",
        "--table",
        required=True,
        choices=SUPPORTED_TABLES,
        help="Table name to connect with",
    )
