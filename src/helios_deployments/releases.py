"""GitHub release publication for helios-deployments library."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

import requests

from .constants import DEFAULT_NETWORK, GITHUB_API_URL, GITHUB_USER_AGENT, NETWORK_CONFIG
from .exceptions import ConfigurationError, ReleaseError
from .timestamps import utc_now
from .types import UNCONFIRMED_BLOCK, ContractCatalogEntry, DeploymentRecord
from .verification import generate_verification_files

logger = logging.getLogger(__name__)


def release_tag(record: DeploymentRecord, now: datetime) -> str:
    """
    Build the release tag name, e.g. "RandomToken-20250701-123456".

    Args:
        record: Deployment being released
        now: Release time, used for the date component
    """
    block = UNCONFIRMED_BLOCK if record.block_number is None else str(record.block_number)
    # Tag names cannot contain spaces
    block = block.replace(" ", "-")
    return f"{record.log_name}-{now.strftime('%Y%m%d')}-{block}"


def release_title(record: DeploymentRecord) -> str:
    """Build the release title."""
    return f"Deployment: {record.key}"


def explorer_tx_url(record: DeploymentRecord, network: str = DEFAULT_NETWORK) -> Optional[str]:
    """Get the explorer link for the deploying transaction."""
    if record.explorer_url:
        return record.explorer_url
    if not record.transaction_hash or network not in NETWORK_CONFIG:
        return None
    return f"{NETWORK_CONFIG[network]['block_explorer_url']}/tx/{record.transaction_hash}"


def release_body(record: DeploymentRecord, asset_name: str, network: str = DEFAULT_NETWORK) -> str:
    """
    Build the markdown release notes for a deployment.

    Args:
        record: Deployment being released
        asset_name: File name of the attached standard JSON input
        network: Network the contract was deployed to

    Returns:
        Markdown body
    """
    chain_name = NETWORK_CONFIG.get(network, {}).get("chain_name", network)
    block = UNCONFIRMED_BLOCK if record.block_number is None else str(record.block_number)

    lines = [
        f"## Automated Deployment: {record.key}",
        "",
        f"A new contract has been automatically deployed to the {chain_name}.",
        "",
        "### Deployment Details",
        f"- **Contract Name**: `{record.key}`",
        f"- **Address**: `{record.address}`",
        f"- **Transaction Hash**: `{record.transaction_hash}`",
        f"- **Block Number**: `{block}`",
        f"- **Timestamp**: `{record.timestamp}`",
    ]

    explorer = explorer_tx_url(record, network)
    if explorer:
        lines.append(f"- **Explorer Link**: [View on {chain_name} Explorer]({explorer})")

    lines += [
        "",
        "### Verification Files",
        f"The attached `{asset_name}` file can be used for contract verification on the "
        'explorer via the "Standard-JSON-Input" method.',
    ]
    return "\n".join(lines)


def _error_detail(response: requests.Response) -> str:
    try:
        return str(response.json())
    except ValueError:
        return response.text


class GitHubReleasePublisher:
    """Creates GitHub releases and attaches assets to them."""

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = GITHUB_API_URL,
        session: Optional[requests.Session] = None,
        timeout: int = 60,
    ):
        """
        Initialize the publisher.

        Args:
            token: GitHub token with permission to create releases
            repository: "owner/repo"
            api_url: GitHub API base URL
            session: Optional requests session
            timeout: Request timeout in seconds

        Raises:
            ConfigurationError: If token or repository are missing or malformed
        """
        if not token or not repository:
            raise ConfigurationError("GITHUB_TOKEN and GITHUB_REPOSITORY are required to publish releases")
        if repository.count("/") != 1:
            raise ConfigurationError(f"Repository must be 'owner/repo', got '{repository}'")

        self.owner, self.repo = repository.split("/")
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self._token = token

    def _headers(self, content_type: str) -> Dict[str, str]:
        return {
            "Authorization": f"token {self._token}",
            "Content-Type": content_type,
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": GITHUB_USER_AGENT,
        }

    def create_release(self, tag_name: str, title: str, body: str) -> Dict[str, Any]:
        """
        Create a published (non-draft) release.

        Returns:
            Release object from the GitHub API

        Raises:
            ReleaseError: If the request fails or the API does not answer 201 Created
        """
        logger.info("Creating release '%s' with tag '%s'", title, tag_name)

        try:
            response = self.session.post(
                f"{self.api_url}/repos/{self.owner}/{self.repo}/releases",
                headers=self._headers("application/json"),
                json={
                    "tag_name": tag_name,
                    "name": title,
                    "body": body,
                    "draft": False,
                    "prerelease": False,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ReleaseError(f"Network error while creating GitHub release: {e}") from e

        if response.status_code != 201:
            detail = _error_detail(response)
            raise ReleaseError(
                f"Failed to create GitHub release. Status code: {response.status_code}: {detail}",
                status_code=response.status_code,
                response_body=detail,
            )

        return response.json()

    def upload_release_asset(self, release: Dict[str, Any], asset_path: Union[Path, str]) -> Dict[str, Any]:
        """
        Upload a file as an asset of a release.

        Args:
            release: Release object returned by create_release
            asset_path: Local file to upload

        Returns:
            Asset object from the GitHub API

        Raises:
            ReleaseError: If the request fails or the API does not answer 201 Created
        """
        path = Path(asset_path)
        # upload_url is a URI template: ".../assets{?name,label}"
        upload_url = release["upload_url"].split("{")[0]

        logger.info("Uploading asset '%s' to release '%s'", path.name, release.get("name"))

        try:
            with open(path, "rb") as f:
                response = self.session.post(
                    upload_url,
                    params={"name": path.name},
                    headers=self._headers("application/octet-stream"),
                    data=f,
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise ReleaseError(f"Network error while uploading asset '{path.name}': {e}") from e

        if response.status_code != 201:
            detail = _error_detail(response)
            raise ReleaseError(
                f"Failed to upload asset. Status code: {response.status_code}: {detail}",
                status_code=response.status_code,
                response_body=detail,
            )

        return response.json()

    def publish(self, tag_name: str, title: str, body: str, asset_path: Union[Path, str]) -> Dict[str, Any]:
        """Create a release and attach one asset to it."""
        release = self.create_release(tag_name, title, body)
        self.upload_release_asset(release, asset_path)
        return release


class ReleaseStep:
    """Generates verification files for a fresh deployment and publishes a release."""

    def __init__(
        self,
        publisher: GitHubReleasePublisher,
        catalog: Iterable[ContractCatalogEntry],
        build_info_dir: Union[Path, str],
        output_dir: Union[Path, str],
        network: str = DEFAULT_NETWORK,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.publisher = publisher
        self.catalog = tuple(catalog)
        self.build_info_dir = Path(build_info_dir)
        self.output_dir = Path(output_dir)
        self.network = network
        self.clock = clock

    def __call__(self, record: DeploymentRecord) -> Dict[str, Any]:
        files = generate_verification_files(record, self.catalog, self.build_info_dir, self.output_dir)
        asset_name = files.standard_input_path.name

        release = self.publisher.publish(
            release_tag(record, self.clock()),
            release_title(record),
            release_body(record, asset_name, self.network),
            files.standard_input_path,
        )
        logger.info("Release published for %s", record.key, extra={"key": record.key, "event": "release_published"})
        return release
