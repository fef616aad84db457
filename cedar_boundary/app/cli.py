"""
Command-line entry point for the Cedar policy boundary.

Each positional argument is the raw text of one input. ``@path`` reads the
text from a file and ``-`` reads it from stdin. The operation's JSON output
goes to stdout; logs go to stderr.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from shared.config import get_config
from shared.errors import BoundaryException
from shared.logging import configure_logging

from .main import PolicyBoundary, get_default_boundary
from .pipeline import stages

OPERATION_ARGUMENTS = {
    stages.GET_CEDAR_VERSION: [],
    stages.IS_AUTHORIZED: ["principal", "action", "resource", "context", "policies", "entities"],
    stages.VALIDATE: ["schema", "policies"],
    stages.POLICY_TO_JSON: ["policy"],
    stages.POLICY_FROM_JSON: ["policy_json"],
    stages.VALIDATE_SCHEMA: ["schema"],
}


def read_input(argument: str) -> str:
    """Resolve ``-`` and ``@path`` arguments to text."""
    if argument == "-":
        return sys.stdin.read()
    if argument.startswith("@"):
        return Path(argument[1:]).read_text(encoding="utf-8")
    return argument


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser, one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="cedar-boundary",
        description="Call a Cedar policy boundary operation and print its envelope"
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: from configuration)")

    subparsers = parser.add_subparsers(dest="operation", required=True)
    for operation, arguments in OPERATION_ARGUMENTS.items():
        subparser = subparsers.add_parser(operation)
        for argument in arguments:
            subparser.add_argument(argument, help=f"{argument} text, @file or -")

    return parser


def main(argv: Optional[Sequence[str]] = None, boundary: Optional[PolicyBoundary] = None) -> int:
    """Run one operation.

    Exit status is 0 on success, 1 on a coded failure, 2 on usage errors and
    3 when the engine is unavailable or violates its contract.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config()
    configure_logging("cedar_boundary", args.log_level or config.log_level)

    try:
        boundary = boundary or get_default_boundary()
        inputs: List[str] = []
        for name in OPERATION_ARGUMENTS[args.operation]:
            inputs.append(read_input(getattr(args, name)))
        output = boundary.call(args.operation, *inputs)
    except OSError as e:
        parser.error(str(e))
    except BoundaryException as e:
        print(json.dumps(e.to_dict()), file=sys.stderr)
        return 3

    print(output)
    if args.operation == stages.GET_CEDAR_VERSION:
        return 0
    return 0 if json.loads(output)["code"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
