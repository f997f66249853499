"""
Shared helpers for CLI subcommands: reading leaves and building trees
from the effective configuration plus command-line overrides.
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path
from typing import Any

from imt.config import RuntimeConfig, TreeConfig, build_tree, get_default_config
from imt.merkle import IMT, LeanIMT
from imt.schemas.canonical import decode_node


logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def read_leaves(path: Path) -> list[Any]:
    """
    Read leaves from a file.

    A file whose content starts with ``[`` is parsed as a JSON array;
    otherwise every non-empty line is one leaf. Decimal text becomes int.
    """
    text = path.read_text().strip()
    if text.startswith("["):
        values = json.loads(text)
        if not isinstance(values, list):
            raise ValueError(f"Leaves file must hold a JSON array: {path}")
        return [decode_node(v) for v in values]
    return [decode_node(line.strip()) for line in text.splitlines() if line.strip()]


def collect_leaves(args: Namespace) -> list[Any]:
    """Gather leaves from --leaves FILE then each --leaf value, in order."""
    leaves: list[Any] = []
    if getattr(args, "leaves", None):
        leaves.extend(read_leaves(Path(args.leaves)))
    for value in getattr(args, "leaf", None) or []:
        leaves.append(decode_node(value))
    return leaves


def tree_config_from_args(args: Namespace) -> TreeConfig:
    """Apply command-line overrides on top of the configured tree defaults."""
    config: RuntimeConfig = getattr(args, "runtime_config", None) or get_default_config()
    base = config.tree
    depth = getattr(args, "depth", None)
    arity = getattr(args, "arity", None)
    zero = getattr(args, "zero", None)
    return TreeConfig(
        kind=getattr(args, "kind", None) or base.kind,
        depth=depth if depth is not None else base.depth,
        arity=arity if arity is not None else base.arity,
        zero_value=decode_node(zero) if zero is not None else base.zero_value,
        hash=getattr(args, "hash", None) or base.hash,
    )


def build_tree_from_args(args: Namespace) -> IMT | LeanIMT:
    tree_config = tree_config_from_args(args)
    leaves = collect_leaves(args)
    logger.info(
        f"Building {tree_config.kind} tree with {len(leaves)} leaves (hash={tree_config.hash})"
    )
    return build_tree(tree_config, leaves)


def add_tree_arguments(parser) -> None:
    """Register the tree-shape options shared by build and prove."""
    parser.add_argument(
        "--leaves",
        type=str,
        default=None,
        help="File with leaves (JSON array or one value per line)",
    )
    parser.add_argument(
        "--leaf",
        action="append",
        default=None,
        help="A leaf value (repeatable, appended after --leaves)",
    )
    parser.add_argument(
        "--kind",
        type=str,
        choices=["lean", "fixed"],
        default=None,
        help="Tree kind (default: from config)",
    )
    parser.add_argument("--depth", type=int, default=None, help="Fixed tree depth")
    parser.add_argument("--arity", type=int, default=None, help="Fixed tree arity")
    parser.add_argument("--zero", type=str, default=None, help="Fixed tree zero value")
    parser.add_argument(
        "--hash",
        type=str,
        default=None,
        help="Hash binding: sha256, sha3_256 or blake2s (default: from config)",
    )
