"""Configuration constants for helios-deployments library."""

from datetime import timedelta

# Interaction tag marking a contract as part of the mandatory-cadence class
SCHEDULED_TAG = "scheduled"

DEFAULT_MANDATORY_INTERVAL = timedelta(hours=12)
DEFAULT_RETENTION_WINDOW = timedelta(hours=48)

DEFAULT_NETWORK = "heliosTestnet"

# Network configuration for the Hardhat networks we deploy to
NETWORK_CONFIG = {
    "heliosTestnet": {
        "chain_name": "Helios Testnet",
        "block_explorer_url": "https://explorer.helioschainlabs.org",
        "default_rpc_env": "HELIOS_RPC_URL",
    },
}

# File names inside the state directory
WORKFLOW_LOG_FILE = "workflow.json"
TRANSIENT_BUFFER_FILE = "deployments.json"
VERIFICATION_DIR = "verification"
CATALOG_FILE = "deployment-config-template.json"

# Hardhat build metadata, relative to the Hardhat project directory
BUILD_INFO_DIR = "artifacts/build-info"

GITHUB_API_URL = "https://api.github.com"
GITHUB_USER_AGENT = "Helios-Deployer-Release-Script"
