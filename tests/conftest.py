"""Shared pytest fixtures for helios-deployments tests."""

import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from helios_deployments.catalog import build_scheduling_config, load_catalog
from helios_deployments.log_store import DeploymentLogStore
from helios_deployments.timestamps import format_timestamp
from helios_deployments.types import ContractCatalogEntry, DeploymentRecord, SchedulingConfig

NOW = datetime(2025, 7, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_catalog_path(fixtures_dir: Path) -> Path:
    """Return path to the sample contract catalog."""
    return fixtures_dir / "sample_catalog.json"


@pytest.fixture
def build_info_dir(fixtures_dir: Path) -> Path:
    """Return path to the sample Hardhat build-info directory."""
    return fixtures_dir / "build-info"


@pytest.fixture
def catalog(sample_catalog_path: Path) -> List[ContractCatalogEntry]:
    """Load the sample catalog entries."""
    return load_catalog(sample_catalog_path)


@pytest.fixture
def scheduling_config(catalog: List[ContractCatalogEntry]) -> SchedulingConfig:
    """Scheduling config for the sample catalog (12h cadence, 48h retention)."""
    return build_scheduling_config(
        catalog,
        mandatory_interval=timedelta(hours=12),
        retention_window=timedelta(hours=48),
    )


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for time-windowed tests."""
    return NOW


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def make_record(now: datetime) -> Callable[..., DeploymentRecord]:
    """Factory for records deployed a given number of hours before NOW."""

    def _make(
        log_name: str,
        hours_ago: Optional[float] = 1,
        key: Optional[str] = None,
        block_number: Optional[int] = 1000,
    ) -> DeploymentRecord:
        timestamp = None
        if hours_ago is not None:
            timestamp = format_timestamp(now - timedelta(hours=hours_ago))
        return DeploymentRecord(
            key=key or f"{log_name} #1",
            log_name=log_name,
            address="0x1234567890123456789012345678901234567890",
            transaction_hash="0xabc123",
            block_number=block_number,
            timestamp=timestamp,
            constructor_args=[],
        )

    return _make


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    """Create a temporary state directory for tests."""
    state_dir = tmp_path / "state"
    state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


@pytest.fixture
def store(temp_state_dir: Path) -> DeploymentLogStore:
    """Log store backed by files in the temporary state directory."""
    return DeploymentLogStore(temp_state_dir / "workflow.json", temp_state_dir / "deployments.json")
