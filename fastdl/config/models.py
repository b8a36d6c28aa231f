from pydantic import BaseModel, Field, field_validator
from typing import Literal


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=3003, ge=1, le=65535)
    status_path: str = "/update"

    @field_validator("status_path")
    @classmethod
    def validate_status_path(cls, v: str) -> str:
        if not v.startswith("/") or v == "/":
            raise ValueError(f"status_path must start with '/' and name a route, got {v!r}")
        return v.rstrip("/")


class PathsConfig(BaseModel):
    sources_root: str = ".."
    output_root: str = "."


class SyncConfig(BaseModel):
    projects: list[str] = Field(default_factory=lambda: ["bhop", "surf"], min_length=1)
    categories: list[str] = Field(default_factory=lambda: ["materials", "sound"], min_length=1)
    source_subdir: str = "cstrike"
    excluded_extension: str = ".bsp"
    compressor: str = "bzip2"
    compressed_suffix: str = ".bz2"
    cooldown_seconds: float = Field(default=60.0, gt=0)

    @field_validator("projects", "categories")
    @classmethod
    def validate_names(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name.strip() or name in (".", "..") or "/" in name or "\\" in name:
                raise ValueError(f"{name!r} is not a single path component")
        if len(set(v)) != len(v):
            raise ValueError("names must be unique")
        return v

    @field_validator("excluded_extension", "compressed_suffix")
    @classmethod
    def normalize_extension(cls, v: str) -> str:
        v = v.strip().lower()
        if not v.lstrip("."):
            raise ValueError("extension cannot be empty")
        return v if v.startswith(".") else f".{v}"


class FastDLConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
