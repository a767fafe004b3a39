"""Unit tests for path helpers and runtime settings."""

from datetime import timedelta
from pathlib import Path

import pytest

from helios_deployments import paths
from helios_deployments.exceptions import ConfigurationError
from helios_deployments.paths import get_state_paths
from helios_deployments.settings import load_settings

ENV_VARS = [
    "HELIOS_STATE_DIR",
    "HELIOS_PROJECT_DIR",
    "HELIOS_CATALOG_PATH",
    "HELIOS_NETWORK",
    "HELIOS_RPC_URL",
    "HELIOS_MANDATORY_INTERVAL_HOURS",
    "HELIOS_RETENTION_HOURS",
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove settings variables from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestGetStatePaths:
    """Test the get_state_paths function."""

    def test_default_paths_use_cwd(self, tmp_path: Path, monkeypatch):
        """Test that state files default to the working directory."""
        monkeypatch.chdir(tmp_path)

        workflow, transient, verification = get_state_paths()

        assert workflow == tmp_path / "workflow.json"
        assert transient == tmp_path / "deployments.json"
        assert verification == tmp_path / "verification"

    def test_custom_root(self, tmp_path: Path):
        """Test that a custom root is used."""
        workflow, transient, _ = get_state_paths(tmp_path / "state")

        assert workflow.parent == (tmp_path / "state").absolute()
        assert transient.name == "deployments.json"

    def test_accepts_string_root(self, tmp_path: Path):
        """Test that string roots are accepted."""
        workflow, _, _ = get_state_paths(str(tmp_path))

        assert isinstance(workflow, Path)
        assert workflow.is_absolute()

    def test_default_dir_can_be_patched(self, tmp_path: Path, monkeypatch):
        """Test that get_default_state_dir is used for the default root."""
        monkeypatch.setattr(paths, "get_default_state_dir", lambda: tmp_path)

        assert get_state_paths()[0] == tmp_path / "workflow.json"


class TestLoadSettings:
    """Test the load_settings function."""

    def test_defaults(self, tmp_path: Path, monkeypatch):
        """Test defaults with an empty environment."""
        monkeypatch.chdir(tmp_path)

        settings = load_settings()

        assert settings.state_dir == tmp_path
        assert settings.catalog_path == tmp_path / "deployment-config-template.json"
        assert settings.network == "heliosTestnet"
        assert settings.rpc_url is None
        assert settings.mandatory_interval is None
        assert settings.build_info_dir == tmp_path / "artifacts" / "build-info"

    def test_reads_environment(self, tmp_path: Path, monkeypatch):
        """Test environment fallbacks."""
        monkeypatch.setenv("HELIOS_STATE_DIR", str(tmp_path / "state"))
        monkeypatch.setenv("HELIOS_RPC_URL", "http://rpc.test")
        monkeypatch.setenv("HELIOS_MANDATORY_INTERVAL_HOURS", "6")
        monkeypatch.setenv("HELIOS_RETENTION_HOURS", "24.5")
        monkeypatch.setenv("GITHUB_TOKEN", "tok")
        monkeypatch.setenv("GITHUB_REPOSITORY", "helios/deployer")

        settings = load_settings()

        assert settings.workflow_log_path == tmp_path / "state" / "workflow.json"
        assert settings.rpc_url == "http://rpc.test"
        assert settings.mandatory_interval == timedelta(hours=6)
        assert settings.retention_window == timedelta(hours=24.5)
        assert settings.github_token == "tok"
        assert settings.github_repository == "helios/deployer"

    def test_arguments_override_environment(self, tmp_path: Path, monkeypatch):
        """Test that explicit arguments win."""
        monkeypatch.setenv("HELIOS_STATE_DIR", str(tmp_path / "env"))

        settings = load_settings(state_dir=tmp_path / "arg", mandatory_interval=timedelta(hours=2))

        assert settings.state_dir == tmp_path / "arg"
        assert settings.mandatory_interval == timedelta(hours=2)

    def test_malformed_hours_raise(self, monkeypatch):
        """Test that bad numeric environment values are configuration errors."""
        monkeypatch.setenv("HELIOS_RETENTION_HOURS", "forever")

        with pytest.raises(ConfigurationError):
            load_settings()
