"""External deployer adapter for helios-deployments library."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from .constants import DEFAULT_NETWORK
from .log_store import DeploymentLogStore
from .types import DeployFailure, DeployResult, DeploySuccess

logger = logging.getLogger(__name__)


class Deployer(Protocol):
    """Anything that can deploy a catalog contract by logName."""

    def deploy(self, log_name: str) -> DeployResult:
        ...


class HardhatDeployer:
    """Deploys contracts by running the project's Hardhat deploy task."""

    def __init__(
        self,
        store: DeploymentLogStore,
        project_dir: Optional[Union[Path, str]] = None,
        network: str = DEFAULT_NETWORK,
        command: Optional[Sequence[str]] = None,
    ):
        """
        Initialize the deployer.

        Args:
            store: Store whose transient buffer the deploy task writes to
            project_dir: Hardhat project directory (defaults to the current directory)
            network: Hardhat network name
            command: Command prefix; "--log-name <logName> --network <network>"
                     is appended (defaults to "npx hardhat deploy")
        """
        self.store = store
        self.project_dir = Path(project_dir) if project_dir is not None else None
        self.network = network
        self.command = list(command) if command is not None else ["npx", "hardhat", "deploy"]

    def build_command(self, log_name: str) -> List[str]:
        """Build the argument vector for deploying a contract."""
        return [*self.command, "--log-name", log_name, "--network", self.network]

    def deploy(self, log_name: str) -> DeployResult:
        """
        Deploy a contract and collect the records it produced.

        Blocks until the deploy task exits. Its output is passed through to
        the console.

        Args:
            log_name: Catalog logName to deploy

        Returns:
            DeploySuccess with the transient buffer's records, or DeployFailure
        """
        argv = self.build_command(log_name)
        logger.info("Executing: %s", " ".join(argv), extra={"log_name": log_name, "event": "deploy_start"})

        try:
            completed = subprocess.run(argv, cwd=self.project_dir, check=False)
        except OSError as e:
            return DeployFailure(log_name=log_name, reason=f"Failed to launch deployer: {e}")

        if completed.returncode != 0:
            return DeployFailure(
                log_name=log_name,
                reason=f"Command failed with exit code {completed.returncode}",
                exit_code=completed.returncode,
            )

        records = self.store.load_transient()
        logger.info(
            "Deployer produced %d record(s)",
            len(records),
            extra={"log_name": log_name, "event": "deploy_done"},
        )
        return DeploySuccess(log_name=log_name, records=records)
