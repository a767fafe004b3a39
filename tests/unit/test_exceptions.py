"""Unit tests for custom exception classes."""

import pytest

from helios_deployments.exceptions import (
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

ALL_EXCEPTIONS = [
    ConfigurationError,
    CatalogNotFoundError,
    ContractNotFoundError,
    LogWriteError,
    DeployerError,
    PublicationError,
    VerificationError,
    BuildInfoNotFoundError,
    ReleaseError,
]


class TestExceptionCatching:
    """Test that exceptions can be caught as their base types."""

    @pytest.mark.parametrize(
        "exc_class,builtin",
        [
            (ConfigurationError, ValueError),
            (CatalogNotFoundError, FileNotFoundError),
            (ContractNotFoundError, ValueError),
            (LogWriteError, OSError),
            (DeployerError, RuntimeError),
            (VerificationError, ValueError),
            (BuildInfoNotFoundError, FileNotFoundError),
            (ReleaseError, RuntimeError),
        ],
    )
    def test_catch_as_builtin(self, exc_class, builtin):
        """Test that each exception is also its matching builtin."""
        with pytest.raises(builtin):
            raise exc_class("test")

    def test_catch_all_as_deployment_error(self):
        """Test that all custom exceptions can be caught as DeploymentError."""
        for exc_class in ALL_EXCEPTIONS:
            with pytest.raises(DeploymentError):
                raise exc_class("test")

    def test_publication_family(self):
        """Test which failures count as publication errors."""
        for exc_class in (VerificationError, BuildInfoNotFoundError, ReleaseError):
            assert issubclass(exc_class, PublicationError)
        for exc_class in (ConfigurationError, DeployerError, LogWriteError):
            assert not issubclass(exc_class, PublicationError)


class TestExceptionCreation:
    """Test creating exceptions with various message types."""

    def test_exceptions_accept_string_messages(self):
        """Test that all exceptions accept string messages."""
        for exc_class in [DeploymentError, *ALL_EXCEPTIONS]:
            exc = exc_class("test message")
            assert str(exc) == "test message"

    def test_release_error_carries_response(self):
        """Test that ReleaseError keeps the status and body."""
        exc = ReleaseError("failed", status_code=500, response_body="oops")

        assert exc.status_code == 500
        assert exc.response_body == "oops"

    def test_release_error_defaults(self):
        """Test that ReleaseError details are optional."""
        exc = ReleaseError("failed")

        assert exc.status_code is None
        assert exc.response_body is None
