"""
IMT CLI

Command-line interface for building incremental Merkle trees and
creating/verifying membership proofs.

Usage:
    python -m imt_cli build --leaves leaves.json
    python -m imt_cli prove 3 --leaves leaves.json --out proof.json
    python -m imt_cli verify proof.json
    python -m imt_cli config --show
"""

__version__ = "0.1.0"
