"""
CLI Prove Command

Create a membership proof for one leaf.

Usage:
    imt prove INDEX --leaves leaves.json [--out proof.json]
    imt prove INDEX --nodes nodes.json [--hash sha256]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from imt.crypto.hashing import binary, get_hash_binding
from imt.merkle import IMT, IMTMerkleProof, LeanIMT, LeanIMTMerkleProof
from imt.schemas.errors import IMTException
from imt_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    build_tree_from_args,
    tree_config_from_args,
)


logger = logging.getLogger(__name__)


def load_lean_tree(nodes_path: Path, hash_name: str) -> LeanIMT:
    """Rebuild a lean tree from an exported node matrix."""
    tree = LeanIMT(binary(get_hash_binding(hash_name)))
    tree.import_nodes(nodes_path.read_text())
    logger.info(f"Imported {tree.size} leaves from {nodes_path}")
    return tree


def create_proof(tree: IMT | LeanIMT, index: int) -> IMTMerkleProof | LeanIMTMerkleProof:
    if isinstance(tree, LeanIMT):
        return tree.generate_proof(index)
    return tree.create_proof(index)


def prove_cmd(args: Namespace) -> int:
    """Handle the prove command."""
    try:
        if args.nodes:
            tree = load_lean_tree(Path(args.nodes), tree_config_from_args(args).hash)
        else:
            tree = build_tree_from_args(args)
        proof = create_proof(tree, args.index)
    except (IMTException, OSError, ValueError) as e:
        logger.error(f"Proof generation failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    text = proof.to_json()
    if args.out:
        Path(args.out).write_text(text + "\n")
        print(f"Proof written to: {args.out}")
    else:
        print(text)

    return EXIT_SUCCESS
