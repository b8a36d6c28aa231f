from .loader import load_config
from .models import (
    FastDLConfig,
    PathsConfig,
    ServerConfig,
    SyncConfig,
)

__all__ = [
    "FastDLConfig",
    "PathsConfig",
    "ServerConfig",
    "SyncConfig",
    "load_config",
]
