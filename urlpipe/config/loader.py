"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import UrlpipeConfig

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _candidate_paths(cli_path: str | None) -> list[Path]:
    paths = [Path("./urlpipe.yaml"), Path.home() / ".urlpipe" / "config.yaml"]
    if cli_path:
        paths.insert(0, Path(cli_path))
    return paths


def load_config(cli_path: str | None = None) -> UrlpipeConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    An empty file is skipped in favour of the next candidate.
    """
    for path in _candidate_paths(cli_path):
        if not path.exists():
            continue
        try:
            raw = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid config in {path}: expected a mapping at top level")
        try:
            return UrlpipeConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return UrlpipeConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings; unset vars become empty."""
    if isinstance(obj, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `urlpipe config init`
DEFAULT_CONFIG_TEMPLATE = """\
# urlpipe.yaml

# Base URL that share links are built on
share_url: "https://tools.example.com/url"

# Third-party transforms registered under the urlpipe.transforms entry point
plugins:
  enabled: true
  # names: []                  # load only these plugins

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
