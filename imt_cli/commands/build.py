"""
CLI Build Command

Build a tree from leaves and print its root.

Usage:
    imt build --leaves leaves.json [--kind lean|fixed] [--export nodes.json] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from imt.merkle import LeanIMT
from imt.schemas.canonical import encode_node
from imt.schemas.errors import IMTException
from imt_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    build_tree_from_args,
)


logger = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    """Summary of a built tree for CLI output."""
    kind: str = ""
    root: Any = None
    depth: int = 0
    size: int = 0
    export_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["root"] = encode_node(self.root)
        if self.export_path is None:
            del d["export_path"]
        return d


def format_human(summary: BuildSummary) -> str:
    lines = [
        f"Kind:  {summary.kind}",
        f"Root:  {summary.root}",
        f"Depth: {summary.depth}",
        f"Size:  {summary.size}",
    ]
    if summary.export_path:
        lines.append(f"Nodes exported to: {summary.export_path}")
    return "\n".join(lines)


def build_cmd(args: Namespace) -> int:
    """Handle the build command."""
    try:
        tree = build_tree_from_args(args)
    except (IMTException, OSError, ValueError) as e:
        logger.error(f"Build failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = BuildSummary(
        kind="lean" if isinstance(tree, LeanIMT) else "fixed",
        root=tree.root,
        depth=tree.depth,
        size=tree.size,
    )

    if args.export:
        if not isinstance(tree, LeanIMT):
            print("Error: --export is only supported for lean trees", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        export_path = Path(args.export)
        export_path.write_text(tree.export())
        summary.export_path = str(export_path)
        logger.info(f"Exported node matrix to {export_path}")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(format_human(summary))

    return EXIT_SUCCESS
