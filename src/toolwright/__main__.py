"""CLI entry point for toolwright.

This module provides the command-line interface for inspecting and calling
tools. It can be invoked as `toolwright` (via the script entry point) or
`python -m toolwright`.

Targets are given as ``module:attribute`` and may name a ToolSet, a single
Tool, or a list of Tools.
"""

import argparse
import asyncio
import importlib
import json
import logging
import sys
from typing import Any

from toolwright import __version__
from toolwright.config import ToolwrightSettings
from toolwright.errors import ToolDefinitionError
from toolwright.models.calls import CallToolRequest
from toolwright.tools import Tool, ToolSet

logger = logging.getLogger(__name__)


def load_toolset(target: str) -> ToolSet:
    """Import ``module:attribute`` and return it as a ToolSet.

    Args:
        target: Import path such as ``myapp.tools:toolset``

    Returns:
        ToolSet: The referenced tool set, or one wrapping the referenced tools.

    Raises:
        ToolDefinitionError: If the target cannot be imported or is not a tool collection.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ToolDefinitionError(f"target must look like module:attribute, got {target!r}")

    try:
        obj: Any = importlib.import_module(module_name)
        for part in attr.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise ToolDefinitionError(f"cannot load {target}: {e}") from e

    if isinstance(obj, ToolSet):
        return obj
    if isinstance(obj, Tool):
        return ToolSet([obj])
    if isinstance(obj, (list, tuple)) and all(isinstance(t, Tool) for t in obj):
        return ToolSet(obj)
    raise ToolDefinitionError(f"{target} is not a ToolSet, Tool or list of Tools")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolwright",
        description="Inspect and call Python functions exposed as tools",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"toolwright {__version__}",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via TOOLWRIGHT_LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    describe = subparsers.add_parser(
        "describe", help="Print the definitions and input schemas of the tools"
    )
    describe.add_argument("target", help="module:attribute of a ToolSet, Tool or list of Tools")

    call = subparsers.add_parser("call", help="Call one tool and print the result envelope")
    call.add_argument("target", help="module:attribute of a ToolSet, Tool or list of Tools")
    call.add_argument("name", help="Name of the tool to call")
    call.add_argument(
        "--arguments",
        type=str,
        default=None,
        help="Tool arguments as a JSON object",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the toolwright CLI.

    Returns:
        Process exit code: 0 on success, 1 when the call or loading failed.
    """
    args = build_parser().parse_args(argv)

    # CLI args override environment variables
    settings_kwargs = {}
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level
    settings = ToolwrightSettings(**settings_kwargs)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        toolset = load_toolset(args.target)
    except ToolDefinitionError as e:
        logger.error(str(e))
        return 1

    if args.command == "describe":
        definitions = [d.to_dict() for d in toolset.definitions()]
        print(json.dumps(definitions, indent=2))
        return 0

    request = CallToolRequest(name=args.name, arguments=args.arguments)
    result = asyncio.run(toolset.dispatch(request))
    print(json.dumps(result.to_wire(), indent=2))
    return 1 if result.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
