"""Tests for fastdl.config models and the YAML loader."""

import pytest
from pydantic import ValidationError

from fastdl.config.models import (
    FastDLConfig,
    PathsConfig,
    ServerConfig,
    SyncConfig,
)
from fastdl.config.loader import DEFAULT_CONFIG_TEMPLATE, load_config, _expand_env_vars


# ── FastDLConfig defaults ──────────────────────────────────────────


class TestFastDLConfigDefaults:
    def test_default_log_level(self, sample_config):
        assert sample_config.log_level == "info"

    def test_default_log_format(self, sample_config):
        assert sample_config.log_format == "text"

    def test_default_projects(self, sample_config):
        assert sample_config.sync.projects == ["bhop", "surf"]

    def test_default_categories(self, sample_config):
        assert sample_config.sync.categories == ["materials", "sound"]

    def test_default_cooldown(self, sample_config):
        assert sample_config.sync.cooldown_seconds == 60

    def test_default_port(self, sample_config):
        assert sample_config.server.port == 3003

    def test_default_paths(self, sample_config):
        assert sample_config.paths == PathsConfig(sources_root="..", output_root=".")


# ── Individual config model validations ─────────────────────────────


class TestServerConfig:
    def test_defaults(self):
        cfg = ServerConfig()
        assert cfg.host == "0.0.0.0"
        assert cfg.status_path == "/update"

    def test_port_out_of_range(self):
        with pytest.raises(ValidationError):
            ServerConfig(port=70000)

    def test_status_path_trailing_slash_stripped(self):
        assert ServerConfig(status_path="/fastdl/update/").status_path == "/fastdl/update"

    def test_status_path_must_be_absolute(self):
        with pytest.raises(ValidationError):
            ServerConfig(status_path="update")

    def test_root_status_path_rejected(self):
        with pytest.raises(ValidationError):
            ServerConfig(status_path="/")


class TestSyncConfig:
    def test_extension_normalized(self):
        cfg = SyncConfig(excluded_extension="BSP", compressed_suffix="GZ")
        assert cfg.excluded_extension == ".bsp"
        assert cfg.compressed_suffix == ".gz"

    def test_empty_extension_rejected(self):
        with pytest.raises(ValidationError):
            SyncConfig(excluded_extension=".")

    def test_empty_project_list_rejected(self):
        with pytest.raises(ValidationError):
            SyncConfig(projects=[])

    def test_duplicate_categories_rejected(self):
        with pytest.raises(ValidationError):
            SyncConfig(categories=["sound", "sound"])

    @pytest.mark.parametrize("name", ["../etc", "a/b", "..", " "])
    def test_project_must_be_single_component(self, name):
        with pytest.raises(ValidationError):
            SyncConfig(projects=[name])

    def test_cooldown_must_be_positive(self):
        with pytest.raises(ValidationError):
            SyncConfig(cooldown_seconds=0)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            FastDLConfig(log_level="verbose")


# ── _expand_env_vars ────────────────────────────────────────────────


class TestExpandEnvVars:
    def test_expands_string_variable(self, monkeypatch):
        monkeypatch.setenv("SRV_ROOT", "/srv/games")
        assert _expand_env_vars("${SRV_ROOT}/cs") == "/srv/games/cs"

    def test_missing_var_becomes_empty(self, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        assert _expand_env_vars("${NOT_SET_ANYWHERE}") == ""

    def test_expands_nested_structures(self, monkeypatch):
        monkeypatch.setenv("PROJ", "bhop")
        result = _expand_env_vars({"sync": {"projects": ["${PROJ}", "surf"]}})
        assert result == {"sync": {"projects": ["bhop", "surf"]}}

    def test_non_string_passthrough(self):
        assert _expand_env_vars(60) == 60


# ── load_config ─────────────────────────────────────────────────────


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    return tmp_path


class TestLoadConfig:
    def test_returns_defaults_when_no_file_exists(self, isolated):
        config = load_config()
        assert config == FastDLConfig()

    def test_loads_valid_yaml(self, isolated):
        (isolated / "fastdl.yaml").write_text("sync:\n  projects: [kz]\n")
        config = load_config()
        assert config.sync.projects == ["kz"]

    def test_raises_on_invalid_yaml(self, isolated):
        (isolated / "fastdl.yaml").write_text("sync: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config()

    def test_raises_on_invalid_config_values(self, isolated):
        (isolated / "fastdl.yaml").write_text("server:\n  port: -1\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config()

    def test_raises_on_non_mapping(self, isolated):
        (isolated / "fastdl.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config()

    def test_cli_path_takes_priority(self, isolated):
        (isolated / "fastdl.yaml").write_text("log_level: debug\n")
        cli_file = isolated / "custom.yaml"
        cli_file.write_text("log_level: error\n")
        config = load_config(cli_path=str(cli_file))
        assert config.log_level == "error"

    def test_user_global_config_used_as_fallback(self, isolated):
        global_dir = isolated / "fakehome" / ".fastdl"
        global_dir.mkdir(parents=True)
        (global_dir / "config.yaml").write_text("log_format: json\n")
        assert load_config().log_format == "json"

    def test_empty_yaml_file_returns_defaults(self, isolated):
        (isolated / "fastdl.yaml").write_text("")
        assert load_config() == FastDLConfig()

    def test_env_vars_expanded_in_loaded_config(self, isolated, monkeypatch):
        monkeypatch.setenv("GAME_ROOT", "/srv/css")
        (isolated / "fastdl.yaml").write_text('paths:\n  sources_root: "${GAME_ROOT}"\n')
        assert load_config().paths.sources_root == "/srv/css"

    def test_port_env_overrides_file(self, isolated, monkeypatch):
        (isolated / "fastdl.yaml").write_text("server:\n  port: 8080\n  host: 127.0.0.1\n")
        monkeypatch.setenv("PORT", "9000")
        config = load_config()
        assert config.server.port == 9000
        assert config.server.host == "127.0.0.1"

    def test_port_env_applies_without_file(self, isolated, monkeypatch):
        monkeypatch.setenv("PORT", "4004")
        assert load_config().server.port == 4004

    def test_default_template_is_loadable(self, isolated):
        (isolated / "fastdl.yaml").write_text(DEFAULT_CONFIG_TEMPLATE)
        assert load_config() == FastDLConfig()
