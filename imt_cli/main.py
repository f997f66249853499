"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m imt_cli build --leaves leaves.json [--kind lean|fixed] [--export nodes.json] [--json]
    python -m imt_cli prove INDEX --leaves leaves.json [--out proof.json]
    python -m imt_cli prove INDEX --nodes nodes.json
    python -m imt_cli verify proof.json [--kind lean|fixed] [--json]
    python -m imt_cli config --init|--show [--path imt.json]

Environment Variables:
    IMT_TREE_KIND       Tree kind: lean or fixed (default: lean)
    IMT_TREE_DEPTH      Fixed tree depth (default: 16)
    IMT_TREE_ARITY      Fixed tree arity (default: 2)
    IMT_ZERO_VALUE      Fixed tree zero value (default: 0)
    IMT_HASH            Hash binding (default: sha256)
    IMT_LOG_LEVEL       Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from imt.config import RuntimeConfig, get_default_config_template, load_config
from imt.schemas.errors import IMTException
from imt_cli import __version__
from imt_cli.commands import build, prove, verify
from imt_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    add_tree_arguments,
)


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="imt",
        description="Incremental Merkle tree CLI - build trees, create and verify membership proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./imt.json or ~/.config/imt/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree and print its root",
        description="Build a tree from leaves and optionally export its node matrix.",
    )
    add_tree_arguments(build_parser)
    build_parser.add_argument(
        "--export",
        type=str,
        default=None,
        help="Write the lean tree node matrix to this path",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Create a membership proof",
        description="Create a membership proof for the leaf at INDEX.",
    )
    prove_parser.add_argument("index", type=int, help="Leaf index")
    add_tree_arguments(prove_parser)
    prove_parser.add_argument(
        "--nodes",
        type=str,
        default=None,
        help="Exported lean tree node matrix to import instead of building from leaves",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the proof (default: stdout)",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a membership proof offline",
        description="Verify a proof JSON file without access to the tree.",
    )
    verify_parser.add_argument("proof_path", type=str, help="Path to proof JSON")
    verify_parser.add_argument(
        "--kind",
        type=str,
        choices=["lean", "fixed"],
        default=None,
        help="Proof kind (default: detected from the proof fields)",
    )
    verify_parser.add_argument(
        "--hash",
        type=str,
        default=None,
        help="Hash binding the tree was built with (default: from config)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="imt.json",
        help="Path for config file (default: imt.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (IMT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config: RuntimeConfig = args.runtime_config
        print(json.dumps(config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: imt config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (IMTException, OSError, ValueError) as e:
        print(f"Error: Failed to load config: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(args.log_level or config.log_level, config.log_file)
    args.runtime_config = config

    if not args.command:
        parser.print_help()
        return EXIT_SUCCESS

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
