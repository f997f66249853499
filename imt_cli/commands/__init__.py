"""CLI subcommands."""

from imt_cli.commands import build, prove, verify

__all__ = ["build", "prove", "verify"]
