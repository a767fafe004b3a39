"""Runtime settings for helios-deployments library."""

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

from .constants import BUILD_INFO_DIR, CATALOG_FILE, DEFAULT_NETWORK, NETWORK_CONFIG
from .exceptions import ConfigurationError
from .paths import get_state_paths


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, resolved once at startup."""

    state_dir: Path
    catalog_path: Path
    project_dir: Path
    network: str
    rpc_url: Optional[str] = None
    mandatory_interval: Optional[timedelta] = None  # None: catalog or library default
    retention_window: Optional[timedelta] = None
    github_token: Optional[str] = None
    github_repository: Optional[str] = None

    @property
    def workflow_log_path(self) -> Path:
        return get_state_paths(self.state_dir)[0]

    @property
    def transient_path(self) -> Path:
        return get_state_paths(self.state_dir)[1]

    @property
    def verification_dir(self) -> Path:
        return get_state_paths(self.state_dir)[2]

    @property
    def build_info_dir(self) -> Path:
        return self.project_dir / BUILD_INFO_DIR


def _hours_from_env(name: str) -> Optional[timedelta]:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return timedelta(hours=float(raw))
    except ValueError as e:
        raise ConfigurationError(f"${name} must be a number of hours, got '{raw}'") from e


def load_settings(
    state_dir: Optional[Union[Path, str]] = None,
    catalog_path: Optional[Union[Path, str]] = None,
    project_dir: Optional[Union[Path, str]] = None,
    network: Optional[str] = None,
    rpc_url: Optional[str] = None,
    mandatory_interval: Optional[timedelta] = None,
    retention_window: Optional[timedelta] = None,
) -> Settings:
    """
    Resolve settings from arguments with environment fallbacks.

    Args:
        state_dir: Directory of workflow.json/deployments.json (defaults to $HELIOS_STATE_DIR, then cwd)
        catalog_path: Contract catalog (defaults to $HELIOS_CATALOG_PATH, then
                      deployment-config-template.json in the project directory)
        project_dir: Hardhat project directory (defaults to $HELIOS_PROJECT_DIR, then cwd)
        network: Hardhat network name (defaults to $HELIOS_NETWORK, then heliosTestnet)
        rpc_url: JSON-RPC URL (defaults to the network's RPC environment variable)
        mandatory_interval: Defaults to $HELIOS_MANDATORY_INTERVAL_HOURS
        retention_window: Defaults to $HELIOS_RETENTION_HOURS

    Returns:
        Settings

    Raises:
        ConfigurationError: If a numeric environment variable is malformed
    """
    if state_dir is None:
        state_dir = os.environ.get("HELIOS_STATE_DIR") or Path.cwd()
    if project_dir is None:
        project_dir = os.environ.get("HELIOS_PROJECT_DIR") or Path.cwd()
    project_path = Path(project_dir).absolute()

    if catalog_path is None:
        catalog_path = os.environ.get("HELIOS_CATALOG_PATH") or project_path / CATALOG_FILE

    if network is None:
        network = os.environ.get("HELIOS_NETWORK") or DEFAULT_NETWORK

    if rpc_url is None:
        rpc_env = NETWORK_CONFIG.get(network, {}).get("default_rpc_env", "HELIOS_RPC_URL")
        rpc_url = os.environ.get(rpc_env)

    if mandatory_interval is None:
        mandatory_interval = _hours_from_env("HELIOS_MANDATORY_INTERVAL_HOURS")
    if retention_window is None:
        retention_window = _hours_from_env("HELIOS_RETENTION_HOURS")

    return Settings(
        state_dir=Path(state_dir).absolute(),
        catalog_path=Path(catalog_path).absolute(),
        project_dir=project_path,
        network=network,
        rpc_url=rpc_url,
        mandatory_interval=mandatory_interval,
        retention_window=retention_window,
        github_token=os.environ.get("GITHUB_TOKEN"),
        github_repository=os.environ.get("GITHUB_REPOSITORY"),
    )
