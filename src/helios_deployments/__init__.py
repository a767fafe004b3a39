"""
helios-deployments: scheduled smart contract deployments with a pruned, append-only history
"""

from importlib.metadata import PackageNotFoundError, version

from .catalog import build_scheduling_config, load_catalog
from .deployer import HardhatDeployer
from .exceptions import (
    BuildInfoNotFoundError,
    CatalogNotFoundError,
    ConfigurationError,
    ContractNotFoundError,
    DeployerError,
    DeploymentError,
    LogWriteError,
    PublicationError,
    ReleaseError,
    VerificationError,
)
from .log_store import DeploymentLogStore
from .orchestrator import ScheduledDeploymentRunner
from .releases import GitHubReleasePublisher, ReleaseStep
from .scheduling import select_next_contract
from .types import (
    ContractCatalogEntry,
    DeployFailure,
    DeploymentRecord,
    DeploySuccess,
    RunResult,
    SchedulingConfig,
)
from .verification import generate_verification_files

try:
    __version__ = version("helios-deployments")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "DeploymentLogStore",
    "ScheduledDeploymentRunner",
    "HardhatDeployer",
    "GitHubReleasePublisher",
    "ReleaseStep",
    "select_next_contract",
    "load_catalog",
    "build_scheduling_config",
    "generate_verification_files",
    "DeploymentRecord",
    "ContractCatalogEntry",
    "SchedulingConfig",
    "DeploySuccess",
    "DeployFailure",
    "RunResult",
    "DeploymentError",
    "ConfigurationError",
    "CatalogNotFoundError",
    "ContractNotFoundError",
    "LogWriteError",
    "DeployerError",
    "PublicationError",
    "VerificationError",
    "BuildInfoNotFoundError",
    "ReleaseError",
]
