"""Custom exception classes for helios-deployments library."""

from typing import Optional


class DeploymentError(Exception):
    """Base exception for scheduled deployment errors."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when the contract catalog or scheduling settings are inconsistent."""

    pass


class CatalogNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when the contract catalog file is not found."""

    pass


class ContractNotFoundError(DeploymentError, ValueError):
    """Raised when a logName has no matching catalog entry."""

    pass


class LogWriteError(DeploymentError, OSError):
    """Raised when the durable log or transient buffer cannot be written."""

    pass


class DeployerError(DeploymentError, RuntimeError):
    """Raised when the external deployer reports a failure."""

    pass


class PublicationError(DeploymentError):
    """Base exception for verification and release publication failures."""

    pass


class VerificationError(PublicationError, ValueError):
    """Raised when a record lacks the metadata needed for verification files."""

    pass


class BuildInfoNotFoundError(PublicationError, FileNotFoundError):
    """Raised when no Hardhat build-info file covers a contract."""

    pass


class ReleaseError(PublicationError, RuntimeError):
    """Raised when the release API answers with an unexpected status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
