"""Shared test fixtures for FastDL."""

from __future__ import annotations

import bz2
from pathlib import Path

import pytest

from fastdl.config.models import FastDLConfig
from fastdl.errors import CompressionError
from fastdl.events import EventSink, ListSink, ProgressEvent


class FakeCompressor:
    """In-process bzip2 stand-in; fails on the file names in ``fail_on``."""

    suffix = ".bz2"

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.calls: list[Path] = []

    async def compress(self, path: Path, sink: EventSink) -> Path:
        self.calls.append(path)
        if path.name in self.fail_on:
            err = CompressionError(path, "simulated failure", returncode=2)
            sink.emit(ProgressEvent.error(str(err)))
            raise err
        artifact = path.with_name(path.name + self.suffix)
        artifact.write_bytes(bz2.compress(path.read_bytes()))
        path.unlink()
        sink.emit(ProgressEvent.progress(f"Compressed: {artifact.name}"))
        return artifact


def write_file(path: Path, content: str = "data") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def relative_files(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


@pytest.fixture
def sources_root(tmp_path: Path) -> Path:
    root = tmp_path / "servers"
    root.mkdir()
    return root


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    root = tmp_path / "fastdl"
    root.mkdir()
    return root


@pytest.fixture
def fastdl_config(sources_root: Path, output_root: Path) -> FastDLConfig:
    return FastDLConfig(
        paths={"sources_root": str(sources_root), "output_root": str(output_root)},
        sync={"projects": ["alpha", "beta"], "categories": ["materials", "sound"]},
    )


@pytest.fixture
def alpha_materials(sources_root: Path) -> Path:
    """alpha/cstrike/materials with two textures and a map file."""
    cat = sources_root / "alpha" / "cstrike" / "materials"
    write_file(cat / "wood.vtf", "wood texture")
    write_file(cat / "rock.vtf", "rock texture")
    write_file(cat / "level1.bsp", "map data")
    return cat


@pytest.fixture
def sink() -> ListSink:
    return ListSink()


@pytest.fixture
def fake_compressor() -> FakeCompressor:
    return FakeCompressor()


@pytest.fixture
def sample_config():
    return FastDLConfig()
