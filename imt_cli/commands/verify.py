"""
CLI Verify Command

Verify a membership proof offline.

Usage:
    imt verify proof.json [--kind lean|fixed] [--hash sha256] [--json]

The proof kind is detected from its fields when --kind is not given.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from imt.crypto.hashing import binary, get_hash_binding
from imt.merkle import (
    IMTMerkleProof,
    LeanIMTMerkleProof,
    verify_imt_proof,
    verify_lean_imt_proof,
)
from imt.schemas.canonical import loads_canonical
from imt.schemas.errors import IMTException
from imt_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    tree_config_from_args,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    kind: str = ""
    hash: str = ""
    valid: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def detect_kind(data: dict[str, Any]) -> str:
    """A fixed tree proof carries path indices; a lean proof does not."""
    if "pathIndices" in data or "path_indices" in data:
        return "fixed"
    return "lean"


def verify_proof_file(proof_path: Path, kind: str | None, hash_name: str) -> VerifySummary:
    text = proof_path.read_text()
    data = loads_canonical(text)
    if not isinstance(data, dict):
        raise ValueError(f"Proof file must hold a JSON object: {proof_path}")

    kind = kind or detect_kind(data)
    binding = get_hash_binding(hash_name)
    logger.info(f"Verifying {kind} proof from {proof_path} (hash={hash_name})")

    if kind == "fixed":
        valid = verify_imt_proof(IMTMerkleProof.from_wire(data), binding)
    else:
        valid = verify_lean_imt_proof(LeanIMTMerkleProof.from_wire(data), binary(binding))

    return VerifySummary(
        proof_path=str(proof_path),
        kind=kind,
        hash=hash_name,
        valid=valid,
    )


def verify_cmd(args: Namespace) -> int:
    """Handle the verify command."""
    try:
        summary = verify_proof_file(
            Path(args.proof_path),
            args.kind,
            tree_config_from_args(args).hash,
        )
    except (IMTException, OSError, ValueError) as e:
        logger.error(f"Verification error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        status = "VALID" if summary.valid else "INVALID"
        print(f"{status}: {summary.kind} proof {summary.proof_path} (hash={summary.hash})")

    return EXIT_SUCCESS if summary.valid else EXIT_VERIFICATION_FAILED
