"""
Runtime Configuration

Central configuration for tree defaults, hash selection, logging and the
HTTP service.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

from imt.crypto.hashing import binary, get_hash_binding
from imt.merkle import IMT, LeanIMT
from imt.schemas.canonical import decode_node
from imt.schemas.errors import ParameterError

load_dotenv()

logger = logging.getLogger(__name__)

# Environment variable prefix
ENV_PREFIX = "IMT_"

TREE_KINDS: tuple[str, ...] = ("lean", "fixed")


@dataclass
class TreeConfig:
    """Defaults used when building a tree from the CLI or the API."""
    kind: str = "lean"
    depth: int = 16
    arity: int = 2
    zero_value: Any = 0
    hash: str = "sha256"

    def __post_init__(self):
        if self.kind not in TREE_KINDS:
            raise ParameterError(
                f"Unknown tree kind: {self.kind!r}",
                parameter="kind",
                details={"supported": list(TREE_KINDS)},
            )


@dataclass
class ApiConfig:
    """Configuration for the HTTP service."""
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML or JSON file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - IMT_TREE_KIND: "lean" or "fixed"
        - IMT_TREE_DEPTH / IMT_TREE_ARITY: fixed tree shape
        - IMT_ZERO_VALUE: fixed tree zero value (decimal text becomes int)
        - IMT_HASH: hash binding name
        - IMT_LOG_LEVEL / IMT_LOG_FILE: logging
        - IMT_API_HOST / IMT_API_PORT: HTTP service
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}TREE_KIND"):
            overrides.setdefault("tree", {})["kind"] = os.getenv(f"{ENV_PREFIX}TREE_KIND")
        if os.getenv(f"{ENV_PREFIX}TREE_DEPTH"):
            overrides.setdefault("tree", {})["depth"] = int(os.getenv(f"{ENV_PREFIX}TREE_DEPTH"))
        if os.getenv(f"{ENV_PREFIX}TREE_ARITY"):
            overrides.setdefault("tree", {})["arity"] = int(os.getenv(f"{ENV_PREFIX}TREE_ARITY"))
        if os.getenv(f"{ENV_PREFIX}ZERO_VALUE"):
            overrides.setdefault("tree", {})["zero_value"] = decode_node(
                os.getenv(f"{ENV_PREFIX}ZERO_VALUE")
            )
        if os.getenv(f"{ENV_PREFIX}HASH"):
            overrides.setdefault("tree", {})["hash"] = os.getenv(f"{ENV_PREFIX}HASH")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        if os.getenv(f"{ENV_PREFIX}API_HOST"):
            overrides.setdefault("api", {})["host"] = os.getenv(f"{ENV_PREFIX}API_HOST")
        if os.getenv(f"{ENV_PREFIX}API_PORT"):
            overrides.setdefault("api", {})["port"] = int(os.getenv(f"{ENV_PREFIX}API_PORT"))

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = dict(data.get("tree", {}) or {})
        api_data = data.get("api", {}) or {}

        if "zero_value" in tree_data:
            tree_data["zero_value"] = decode_node(tree_data["zero_value"])

        return cls(
            tree=TreeConfig(**tree_data),
            api=ApiConfig(**api_data),
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for key, value in overrides.get("tree", {}).items():
            setattr(new_config.tree, key, value)
        new_config.tree.__post_init__()

        for key, value in overrides.get("api", {}).items():
            setattr(new_config.api, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "kind": self.tree.kind,
                "depth": self.tree.depth,
                "arity": self.tree.arity,
                "zero_value": self.tree.zero_value,
                "hash": self.tree.hash,
            },
            "api": {
                "host": self.api.host,
                "port": self.api.port,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


def load_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load configuration from a file, then overlay environment variables.

    Search order when ``path`` is None:
      1. ./imt.json
      2. ./.imt.json
      3. ~/.config/imt/config.json

    Files ending in .yaml/.yml are read as YAML, anything else as JSON.
    """
    if path is not None:
        path = Path(path)
        if path.suffix in (".yaml", ".yml"):
            config = RuntimeConfig.from_yaml(path)
        else:
            config = RuntimeConfig.from_json(path)
        logger.info(f"Loaded config from {path}")
        return config.with_env_overrides()

    search_paths = [
        Path.cwd() / "imt.json",
        Path.cwd() / ".imt.json",
        Path.home() / ".config" / "imt" / "config.json",
    ]

    config: RuntimeConfig | None = None
    for candidate in search_paths:
        if candidate.exists():
            config = RuntimeConfig.from_json(candidate)
            logger.info(f"Loaded config from {candidate}")
            break

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def build_tree(tree_config: TreeConfig, leaves: Sequence[Any] = ()) -> IMT | LeanIMT:
    """Build the configured tree kind with the configured hash binding."""
    binding = get_hash_binding(tree_config.hash)
    if tree_config.kind == "fixed":
        return IMT(
            binding,
            tree_config.depth,
            tree_config.zero_value,
            tree_config.arity,
            list(leaves),
        )
    return LeanIMT(binary(binding), list(leaves))


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
