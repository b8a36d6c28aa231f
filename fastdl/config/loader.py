"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import FastDLConfig


def load_config(cli_path: str | None = None) -> FastDLConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    A ``PORT`` environment variable overrides ``server.port`` whichever file wins.
    """
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./fastdl.yaml"),
        Path.home() / ".fastdl" / "config.yaml",
    ]

    raw: dict = {}
    source = "defaults"
    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            if loaded is None:
                continue
            if not isinstance(loaded, dict):
                raise ValueError(f"Invalid config in {path}: top level must be a mapping")
            raw = _expand_env_vars(loaded)
            source = str(path)
            break

    port = os.environ.get("PORT")
    if port:
        server = dict(raw.get("server") or {})
        server["port"] = port
        raw = {**raw, "server": server}

    try:
        return FastDLConfig(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid config in {source}: {e}") from e


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `fastdl config init`
DEFAULT_CONFIG_TEMPLATE = """\
# fastdl.yaml

# HTTP service
server:
  host: "0.0.0.0"
  port: 3003                   # overridden by $PORT when set
  status_path: "/update"

# Filesystem roots
paths:
  sources_root: ".."           # holds <project>/<source_subdir>/<category>
  output_root: "."             # holds <project>/<category>

# Mirroring
sync:
  projects: [bhop, surf]
  categories: [materials, sound]
  source_subdir: "cstrike"
  excluded_extension: ".bsp"   # map files are never published
  compressor: "bzip2"
  compressed_suffix: ".bz2"
  cooldown_seconds: 60

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
