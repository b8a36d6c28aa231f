"""HTTP surface: static asset exposure and the live update stream."""

from fastdl.server.app import create_app

__all__ = ["create_app"]
