"""Path rendering shared by the progress messages of the pipeline."""

from __future__ import annotations

import os
from pathlib import Path


def display_path(path: Path, root: Path | None) -> str:
    """Render ``path`` relative to ``root`` for progress messages."""
    if root is None:
        return str(path)
    try:
        return os.path.relpath(path, root)
    except ValueError:
        # different drive on Windows
        return str(path)
